"""
Response normalizer - coerce loosely structured model output into an AnalysisResult.
"""
import json
import logging
from typing import Any

from prompt_improver.schemas import AnalysisResult, Intent

logger = logging.getLogger(__name__)

FALLBACK_CRITIQUE_PREFIX = "Failed to parse AI response. Raw response: "
FALLBACK_IMPROVED_PROMPT = "Could not generate improved prompt."


def _strip_fences(text: str) -> str:
    """Remove markdown code-fence markers anywhere in the text."""
    return text.replace("```json", "").replace("```", "").strip()


def _extract_object_span(text: str) -> str | None:
    """Slice from the first '{' to the last '}', for JSON wrapped in prose."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start:end + 1]


def _coerce_intent(value: Any) -> Intent:
    if isinstance(value, str):
        try:
            return Intent(value.strip().upper())
        except ValueError:
            pass
    logger.warning(f"Unrecognized intent {value!r}, defaulting to {Intent.QUESTION.value}")
    return Intent.QUESTION


def _to_result(data: Any) -> AnalysisResult:
    """Build a result from a parsed payload. Raises ValueError on a bad shape."""
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

    critique = data.get("critique")
    improved = data.get("improvedPrompt")
    if not isinstance(critique, str) or not isinstance(improved, str):
        raise ValueError("Response is missing 'critique' or 'improvedPrompt'")
    if not critique.strip():
        raise ValueError("Response has an empty 'critique'")

    action_plan = data.get("actionPlan")
    if action_plan is not None and not isinstance(action_plan, str):
        action_plan = str(action_plan)

    return AnalysisResult(
        critique=critique,
        improved_prompt=improved,
        intent=_coerce_intent(data.get("intent")),
        action_plan=action_plan
    )


def fallback_result(raw_text: str) -> AnalysisResult:
    return AnalysisResult(
        critique=FALLBACK_CRITIQUE_PREFIX + raw_text,
        improved_prompt=FALLBACK_IMPROVED_PROMPT,
        intent=Intent.QUESTION
    )


def parse_strict(raw_text: str) -> AnalysisResult:
    """
    Parse output that is expected to be a bare JSON object (JSON-mode backends).
    Raises ValueError instead of degrading.
    """
    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Backend returned invalid JSON: {e}") from e
    return _to_result(data)


def normalize_response(raw_text: str) -> AnalysisResult:
    """
    Never raises. Strips code fences, parses, and falls back to a displayable
    QUESTION result when the text is not a usable JSON object.
    """
    cleaned = _strip_fences(raw_text)
    candidates = [cleaned]
    span = _extract_object_span(cleaned)
    if span is not None and span != cleaned:
        candidates.append(span)

    for candidate in candidates:
        try:
            result = _to_result(json.loads(candidate))
            logger.debug(f"Normalized response: intent={result.intent.value}")
            return result
        except (json.JSONDecodeError, ValueError) as e:
            logger.debug(f"Parse attempt failed: {e}")

    logger.warning(f"Failed to parse AI response, using fallback: {raw_text[:200]}")
    return fallback_result(raw_text)
