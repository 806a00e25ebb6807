import json

import pytest

from prompt_improver.schemas import Intent
from prompt_improver.services.normalizer import normalize_response, parse_strict

PAYLOAD = {
    "critique": "Missing constraints",
    "improvedPrompt": "Context: ... Objective: ... Constraints: ... Output Format: ...",
    "intent": "EXECUTION",
    "actionPlan": "1. Locate bug. 2. Patch.",
}


@pytest.mark.parametrize("wrap", [
    lambda s: s,
    lambda s: f"```json\n{s}\n```",
    lambda s: f"```\n{s}\n```",
    lambda s: f"  \n{s}\n  ",
])
def test_well_formed_json_is_returned_exactly(wrap):
    result = normalize_response(wrap(json.dumps(PAYLOAD)))
    assert result.model_dump(by_alias=True) == PAYLOAD


def test_missing_action_plan_is_absent():
    payload = {k: v for k, v in PAYLOAD.items() if k != "actionPlan"}
    result = normalize_response(json.dumps(payload))
    assert result.action_plan is None
    assert result.intent == Intent.EXECUTION


@pytest.mark.parametrize("raw", ["not json at all", "", "[1, 2, 3]", '{"critique": 1}'])
def test_unparseable_text_degrades_to_question(raw):
    result = normalize_response(raw)
    assert result.intent == Intent.QUESTION
    assert result.improved_prompt == "Could not generate improved prompt."
    assert result.critique == "Failed to parse AI response. Raw response: " + raw
    assert result.action_plan is None


def test_prose_wrapped_json_is_recovered():
    raw = "Sure! Here is the analysis:\n```json\n" + json.dumps(PAYLOAD) + "\n```\nHope this helps."
    result = normalize_response(raw)
    assert result.critique == PAYLOAD["critique"]
    assert result.action_plan == PAYLOAD["actionPlan"]


@pytest.mark.parametrize("intent,expected", [
    ("CONTEXT", Intent.CONTEXT),
    ("question", Intent.QUESTION),
    ("execution", Intent.EXECUTION),
    ("REFACTOR", Intent.QUESTION),
    (None, Intent.QUESTION),
])
def test_intent_is_coerced_into_known_values(intent, expected):
    payload = dict(PAYLOAD, intent=intent)
    assert normalize_response(json.dumps(payload)).intent == expected


def test_non_string_action_plan_is_stringified():
    payload = dict(PAYLOAD, actionPlan=["step one", "step two"])
    result = normalize_response(json.dumps(payload))
    assert result.action_plan == "['step one', 'step two']"


def test_parse_strict_accepts_bare_json():
    result = parse_strict(json.dumps(PAYLOAD))
    assert result.improved_prompt == PAYLOAD["improvedPrompt"]


@pytest.mark.parametrize("raw", ["```json\n{}\n```", "{}", "nope"])
def test_parse_strict_rejects_anything_else(raw):
    with pytest.raises(ValueError):
        parse_strict(raw)


@pytest.mark.parametrize("critique", ["", "   \n"])
def test_blank_critique_takes_the_fallback(critique):
    raw = json.dumps({**PAYLOAD, "critique": critique})

    result = normalize_response(raw)

    assert result.intent == Intent.QUESTION
    assert result.critique == "Failed to parse AI response. Raw response: " + raw
    with pytest.raises(ValueError):
        parse_strict(raw)
