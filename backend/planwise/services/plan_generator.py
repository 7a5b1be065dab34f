"""LLM-backed plan generation: compose, call, validate."""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Protocol, Sequence

from planwise.core.config import settings
from planwise.observability.metrics import log_metric, timed
from planwise.observability.tracing import annotate, trace
from planwise.planning.client import GeminiClient
from planwise.planning.prompts import compose_prompt
from planwise.planning.schemas import CompletedTask, PlanMode, PlanRequest, PlanResponse
from planwise.planning.validation import Strictness, parse_plan_response

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    def generate(self, prompt: str, *, request_id: Optional[str] = None) -> str:
        ...


def generate_plan(
    request: PlanRequest,
    completed_tasks: Optional[Sequence[CompletedTask]] = None,
    *,
    mode: PlanMode = PlanMode.DAILY_ONLY,
    client: Optional[TextGenerator] = None,
    today: Optional[date] = None,
    strictness: Optional[Strictness] = None,
    request_id: Optional[str] = None,
    user_id: Optional[str] = None,
) -> PlanResponse:
    """Produce one validated plan for ``request``.

    Daily mode avoids the titles in ``completed_tasks``; full-curriculum mode
    ignores them and uses ``request.completed_topics`` instead. Nothing is
    persisted here.
    """
    level = strictness or settings.plan_validation_strictness
    metadata = {"mode": mode.value, "strictness": level, "completed_tasks": len(completed_tasks or [])}
    success = False
    try:
        with trace("plan.generate", metadata=metadata, user_id=user_id, request_id=request_id) as span, timed(
            "plan.generate", {"mode": mode.value}
        ):
            prompt = compose_prompt(
                request,
                completed_tasks if mode is PlanMode.DAILY_ONLY else None,
                mode=mode,
                today=today,
            )
            generator = client or GeminiClient()
            raw_text = generator.generate(prompt, request_id=request_id)
            plan = parse_plan_response(raw_text, strictness=level)
            annotate(
                span,
                topics=len(plan.curriculum.topics),
                tasks=len(plan.tasks),
                assumptions=len(plan.assumptions),
            )
            success = True
    finally:
        log_metric("plan.generate.success", 1 if success else 0, metadata={"mode": mode.value})

    logger.info(
        "Generated %s plan with %d topic(s) and %d task(s)",
        mode.value,
        len(plan.curriculum.topics),
        len(plan.tasks),
    )
    return plan


def generate_curriculum(request: PlanRequest, **kwargs) -> PlanResponse:
    """Full-curriculum variant of :func:`generate_plan`."""
    return generate_plan(request, None, mode=PlanMode.FULL_CURRICULUM, **kwargs)
