"""Gemini generateContent client with model/API-version fallback."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from planwise.core.config import settings
from planwise.observability.metrics import log_metric
from planwise.observability.tracing import annotate, trace
from planwise.planning.errors import (
    Candidate,
    CandidateExhaustedError,
    CandidateRequestError,
    GenerationConfigError,
    GenerationEndpointError,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-1.5-flash"
FALLBACK_MODELS = (
    "gemini-1.5-flash-latest",
    "gemini-1.5-flash-001",
    "gemini-1.5-flash",
    "gemini-1.5-pro-latest",
    "gemini-1.5-pro-001",
    "gemini-1.5-pro",
    "gemini-2.0-flash-exp",
    "gemini-2.0-flash-thinking-exp-001",
)
MODEL_SUFFIXES = ("-latest", "-001")

GENERATION_CONFIG: Dict[str, Any] = {
    "temperature": 0.3,
    "topK": 40,
    "topP": 0.95,
    "maxOutputTokens": 8192,
    "responseMimeType": "application/json",
}

_VALIDATION_HINTS = ("pattern", "invalid", "format")


def model_name_variants(model: str) -> List[str]:
    """The configured model, its suffixed variants, then known fallbacks, without duplicates."""
    names = [model]
    names.extend(f"{model}{suffix}" for suffix in MODEL_SUFFIXES if not model.endswith(suffix))
    names.extend(FALLBACK_MODELS)
    return list(dict.fromkeys(names))


def build_candidates(model: str, api_versions: Sequence[str]) -> List[Candidate]:
    """Every (api version, model) pair in trial order: versions outer, models inner."""
    models = model_name_variants(model)
    return [Candidate(api_version=version, model=name) for version in api_versions for name in models]


def build_request_body(prompt: str) -> Dict[str, Any]:
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": dict(GENERATION_CONFIG),
    }


class GeminiClient:
    """Sends one prompt to Gemini, walking the candidate list until a model answers.

    The credential is checked before any request is made. Not-found and
    bad-request answers move on to the next candidate, as does any other
    HTTP error status (its body is kept for the final error). Transport
    failures and successful replies without text stop the search at once.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        api_versions: Optional[Sequence[str]] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        raw_key = api_key if api_key is not None else settings.gemini_api_key
        if raw_key is None:
            raise GenerationConfigError("GEMINI_API_KEY or GOOGLE_GEMINI_API environment variable is not set")
        if not raw_key.strip():
            raise GenerationConfigError("GEMINI_API_KEY is empty")

        self._api_key = raw_key.strip()
        self.model = (model or settings.gemini_model or "").strip() or DEFAULT_MODEL
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self.api_versions = list(api_versions if api_versions is not None else settings.gemini_api_versions)
        self.timeout = timeout if timeout is not None else settings.gemini_timeout_seconds
        self._transport = transport

    def candidates(self) -> List[Candidate]:
        return build_candidates(self.model, self.api_versions)

    def generate(self, prompt: str, *, request_id: Optional[str] = None) -> str:
        """Return the reply text of the first candidate that answers successfully."""
        body = build_request_body(prompt)
        attempted: List[Candidate] = []
        last_error: Optional[CandidateRequestError] = None

        with httpx.Client(timeout=self.timeout, transport=self._transport) as http:
            for candidate in self.candidates():
                attempted.append(candidate)
                with trace(
                    "plan.generate.attempt",
                    metadata={"api_version": candidate.api_version, "model": candidate.model},
                    request_id=request_id,
                ) as span:
                    try:
                        text = self._attempt(http, candidate, body)
                    except CandidateRequestError as exc:
                        annotate(span, status_code=exc.status_code)
                        last_error = exc
                        continue
                log_metric("plan.generate.attempts", len(attempted), {"model": candidate.model, "success": True})
                logger.info("Gemini candidate %s answered after %d attempt(s)", candidate, len(attempted))
                return text

        log_metric("plan.generate.attempts", len(attempted), {"model": self.model, "success": False})
        if last_error is not None:
            raise CandidateExhaustedError(str(last_error), attempted, last_error)
        raise CandidateExhaustedError(
            "All model name variations failed. Please check your GEMINI_API_KEY and model name.",
            attempted,
        )

    def _url(self, candidate: Candidate) -> str:
        return f"{self.base_url}/{candidate.api_version}/models/{candidate.model}:generateContent"

    def _attempt(self, http: httpx.Client, candidate: Candidate, body: Dict[str, Any]) -> str:
        try:
            response = http.post(self._url(candidate), params={"key": self._api_key}, json=body)
        except httpx.HTTPError as exc:
            raise GenerationEndpointError(f"Gemini API request to {candidate} failed: {exc}") from exc

        if not response.is_success:
            error = _request_error(candidate, response)
            if response.status_code == 404:
                logger.info("Gemini candidate %s not found, trying next variation", candidate)
            elif response.status_code == 400:
                logger.warning("Bad request for %s, trying next variation: %s", candidate, error.detail)
            else:
                logger.error("Gemini API error for %s: %s", candidate, response.text)
            raise error

        return _extract_text(response, candidate)


def _request_error(candidate: Candidate, response: httpx.Response) -> CandidateRequestError:
    raw = response.text
    try:
        payload = response.json()
    except ValueError:
        detail = raw or f"HTTP {response.status_code} {response.reason_phrase}"
    else:
        api_error = payload.get("error", payload) if isinstance(payload, dict) else payload
        detail = raw
        if isinstance(api_error, dict):
            detail = str(api_error.get("message") or api_error.get("status") or raw)
        if any(hint in detail for hint in _VALIDATION_HINTS):
            detail = f"API validation error: {detail}. Please check your GEMINI_API_KEY format and model name."
    return CandidateRequestError(candidate, response.status_code, response.reason_phrase, detail)


def _extract_text(response: httpx.Response, candidate: Candidate) -> str:
    try:
        data = response.json()
    except ValueError as exc:
        raise GenerationEndpointError(f"Gemini response from {candidate} is not JSON") from exc

    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        text = None
    if not text:
        raise GenerationEndpointError("No content in Gemini response")
    return text
