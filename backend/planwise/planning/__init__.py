"""Plan-generation pipeline: prompt composition, model negotiation, reply validation."""
