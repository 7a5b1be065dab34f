"""Turn the generator's raw reply into a validated PlanResponse."""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Literal, Type

from pydantic import BaseModel, ValidationError

from planwise.planning.errors import PlanParseError, PlanShapeError, ShapeIssue
from planwise.planning.schemas import DEFAULT_OVERVIEW, CurriculumTopic, PlanResponse, PlanTask

logger = logging.getLogger(__name__)

Strictness = Literal["lenient", "strict"]

_OPENING_FENCE = re.compile(r"^```[\w+-]*[ \t]*\n?")
_CLOSING_FENCE = re.compile(r"\n?[ \t]*```$")

_PYDANTIC_EXPECTED = {
    "missing": "present",
    "model_type": "object",
    "dict_type": "object",
    "list_type": "array",
    "string_type": "string",
    "float_type": "number",
    "int_type": "number",
    "literal_error": "one of high, medium, low",
}


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ``` / ```json fence; unfenced text is only trimmed."""
    cleaned = text.strip()
    if not cleaned.startswith("```"):
        return cleaned
    cleaned = _OPENING_FENCE.sub("", cleaned, count=1)
    cleaned = _CLOSING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def kind_of(value: Any) -> str:
    """JSON kind of a parsed value, used in error messages."""
    if value is None:
        return "null"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    if isinstance(value, str):
        return "string"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    return type(value).__name__


def parse_plan_text(raw_text: str) -> Any:
    """Decode the (de-fenced) reply as JSON."""
    cleaned = strip_code_fence(raw_text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse AI response: %s. Raw content: %s", exc, raw_text)
        raise PlanParseError(str(exc), raw_text) from exc


def collect_shape_issues(data: Any) -> List[ShapeIssue]:
    """Run every structural check and return the failures in check order."""
    if not isinstance(data, dict):
        return [ShapeIssue("plan", "object", kind_of(data))]

    issues: List[ShapeIssue] = []
    expected_kinds = {"curriculum": "object", "tasks": "array", "assumptions": "array"}
    for key, expected in expected_kinds.items():
        if data.get(key) is None:
            issues.append(ShapeIssue(key, expected, "missing"))

    curriculum = data.get("curriculum")
    if curriculum is not None:
        if not isinstance(curriculum, dict):
            issues.append(ShapeIssue("curriculum", "object", kind_of(curriculum)))
        elif curriculum.get("topics") is None:
            issues.append(ShapeIssue("curriculum.topics", "array", "missing"))
        elif not isinstance(curriculum["topics"], list):
            issues.append(ShapeIssue("curriculum.topics", "array", kind_of(curriculum["topics"])))

    for key in ("tasks", "assumptions"):
        value = data.get(key)
        if value is not None and not isinstance(value, list):
            issues.append(ShapeIssue(key, "array", kind_of(value)))
    return issues


def collect_leaf_issues(data: Dict[str, Any]) -> List[ShapeIssue]:
    """Type-check every topic, task and assumption. Only used in strict mode."""
    issues: List[ShapeIssue] = []
    for index, topic in enumerate(data["curriculum"]["topics"]):
        issues.extend(_model_issues(CurriculumTopic, topic, f"curriculum.topics[{index}]"))
    for index, task in enumerate(data["tasks"]):
        issues.extend(_model_issues(PlanTask, task, f"tasks[{index}]"))
    for index, assumption in enumerate(data["assumptions"]):
        if not isinstance(assumption, str):
            issues.append(ShapeIssue(f"assumptions[{index}]", "string", kind_of(assumption)))
    return issues


def validate_plan_data(data: Any, *, strictness: Strictness = "lenient") -> PlanResponse:
    """Check the parsed reply and build the PlanResponse.

    A blank ``curriculum.overview`` is replaced with a default; every other
    problem raises PlanShapeError. In lenient mode topic/task contents are
    passed through as parsed.
    """
    issues = collect_shape_issues(data)
    if not issues and strictness == "strict":
        issues = collect_leaf_issues(data)
    if issues:
        keys = sorted(data.keys()) if isinstance(data, dict) else []
        logger.error("Invalid plan response structure (%s). Response keys: %s", issues[0].describe(), keys)
        raise PlanShapeError(issues)

    curriculum = dict(data["curriculum"])
    overview = curriculum.get("overview")
    if not overview or (isinstance(overview, str) and not overview.strip()):
        curriculum["overview"] = DEFAULT_OVERVIEW
    elif not isinstance(overview, str):
        curriculum["overview"] = str(overview)

    tasks = data["tasks"]
    if strictness == "strict":
        curriculum["topics"] = [CurriculumTopic.model_validate(topic).model_dump() for topic in curriculum["topics"]]
        tasks = [PlanTask.model_validate(task).model_dump() for task in tasks]

    return PlanResponse.model_validate(
        {"curriculum": curriculum, "tasks": tasks, "assumptions": data["assumptions"]}
    )


def parse_plan_response(raw_text: str, *, strictness: Strictness = "lenient") -> PlanResponse:
    """De-fence, decode and validate a raw generator reply."""
    return validate_plan_data(parse_plan_text(raw_text), strictness=strictness)


def _model_issues(model: Type[BaseModel], value: Any, path: str) -> List[ShapeIssue]:
    try:
        model.model_validate(value, strict=True)
    except ValidationError as exc:
        return [_issue_from_error(error, path) for error in exc.errors()]
    return []


def _issue_from_error(error: Dict[str, Any], path: str) -> ShapeIssue:
    location = "".join(f"[{part}]" if isinstance(part, int) else f".{part}" for part in error.get("loc", ()))
    field = f"{path}{location}"
    if error["type"] == "missing":
        return ShapeIssue(field, "present", "missing")
    expected = _PYDANTIC_EXPECTED.get(error["type"], error.get("msg", "valid"))
    return ShapeIssue(field, expected, kind_of(error.get("input")))
