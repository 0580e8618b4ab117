"""Tests for model reply extraction and decision validation."""

from __future__ import annotations

import json

import pytest

from anchor_ai.domain.enums import DecisionAction, NotificationTone, StreakState
from anchor_ai.graph.parsing import (
    DEFAULT_CONFIDENCE,
    DecisionParseError,
    extract_json_object,
    parse_decision,
    validate_decision,
    validate_parameters,
)


class TestExtraction:
    def test_plain_json(self) -> None:
        assert extract_json_object('{"action": "no_action"}') == {"action": "no_action"}

    def test_prose_around_json(self) -> None:
        text = 'Sure! Here is my decision:\n{"action": "notification", "confidence": 0.9}\nHope it helps {:'
        assert extract_json_object(text) == {"action": "notification", "confidence": 0.9}

    def test_markdown_fence(self) -> None:
        text = '```json\n{"action": "no_action", "parameters": {"new_difficulty": 2}}\n```'
        assert extract_json_object(text)["parameters"] == {"new_difficulty": 2}

    def test_nested_braces_in_strings(self) -> None:
        text = '{"reasoning": "use {curly} words", "action": "no_action"} trailing }'
        assert extract_json_object(text)["reasoning"] == "use {curly} words"

    def test_no_json_raises(self) -> None:
        with pytest.raises(DecisionParseError):
            extract_json_object("I think you should rest today.")

    def test_truncated_json_raises(self) -> None:
        with pytest.raises(DecisionParseError):
            extract_json_object('{"action": "no_action", "reasoning": "cut off')

    def test_empty_reply_raises(self) -> None:
        with pytest.raises(DecisionParseError):
            extract_json_object("")


class TestValidateDecision:
    def test_missing_action_defaults_to_no_action(self) -> None:
        decision = validate_decision({"reasoning": "r", "confidence": 0.4})
        assert decision.action == DecisionAction.NO_ACTION

    def test_unknown_action_defaults_to_no_action(self) -> None:
        decision = validate_decision({"action": "delete_account"})
        assert decision.action == DecisionAction.NO_ACTION

    def test_unhashable_action_defaults_to_no_action(self) -> None:
        decision = validate_decision({"action": ["notification"]})
        assert decision.action == DecisionAction.NO_ACTION

    @pytest.mark.parametrize("raw,expected", [
        (1.7, 1.0),
        (-3, 0.0),
        (0, 0.0),
        (0.42, 0.42),
        ("0.9", DEFAULT_CONFIDENCE),
        (None, DEFAULT_CONFIDENCE),
        (True, DEFAULT_CONFIDENCE),
        (10 ** 400, 1.0),
    ])
    def test_confidence_is_clamped(self, raw, expected) -> None:
        decision = validate_decision({"action": "no_action", "confidence": raw})
        assert decision.confidence == expected
        assert 0.0 <= decision.confidence <= 1.0

    def test_missing_reasoning_gets_default(self) -> None:
        decision = validate_decision({"action": "no_action", "reasoning": 12})
        assert decision.reasoning

    def test_empty_parameters_collapse_to_none(self) -> None:
        decision = validate_decision({"action": "no_action", "parameters": {}})
        assert decision.parameters is None

    def test_all_invalid_parameters_collapse_to_none(self) -> None:
        decision = validate_decision({
            "action": "pressure_adjustment",
            "parameters": {"new_difficulty": "hard", "new_streak_state": "paused"},
        })
        assert decision.action == DecisionAction.PRESSURE_ADJUSTMENT
        assert decision.parameters is None


class TestValidateParameters:
    def test_non_dict_is_none(self) -> None:
        assert validate_parameters(["new_difficulty", 2]) is None

    @pytest.mark.parametrize("raw,expected", [(2, 2), (0, 1), (9, 5), (2.5, 3), (3.4, 3), (-1.2, 1)])
    def test_difficulty_rounded_and_clamped(self, raw, expected) -> None:
        assert validate_parameters({"new_difficulty": raw}).new_difficulty == expected

    def test_invalid_field_dropped_valid_kept(self) -> None:
        params = validate_parameters({
            "new_difficulty": "two",
            "new_streak_state": "protected",
            "notification_tone": "shouty",
            "notification_type": "check_in",
        })
        assert params.new_difficulty is None
        assert params.new_streak_state == StreakState.PROTECTED
        assert params.notification_tone is None
        assert params.notification_type == "check_in"

    def test_tone_accepted(self) -> None:
        assert validate_parameters({"notification_tone": "gentle"}).notification_tone == NotificationTone.GENTLE

    def test_task_modifications_filtered_and_clamped(self) -> None:
        params = validate_parameters({"task_modifications": [
            {"task_id": "t1", "new_effort": 2},
            {"task_id": "t2", "new_effort": 11},      # clamped to 5
            {"task_id": "t3", "new_effort": -4},      # clamped to 1
            {"new_effort": 3},                         # missing task_id: dropped
            {"task_id": "", "new_effort": 3},          # empty task_id: dropped
            {"task_id": "t4", "new_effort": "three"},  # non-numeric: dropped
            {"task_id": "t5"},                         # missing effort: dropped
            "t6",                                      # not an object: dropped
        ]})
        assert [(m.task_id, m.new_effort) for m in params.task_modifications] == [
            ("t1", 2), ("t2", 5), ("t3", 1),
        ]

    def test_task_modifications_all_invalid_dropped(self) -> None:
        assert validate_parameters({"task_modifications": [{"new_effort": 3}]}) is None

    def test_target_id_lists(self) -> None:
        params = validate_parameters({"habit_ids": ["h1", "", None, "h2"], "streak_ids": "s1"})
        assert params.habit_ids == ["h1", "h2"]
        assert params.streak_ids is None


class TestParseDecision:
    def test_full_reply(self) -> None:
        reply = "Decision follows.\n" + json.dumps({
            "action": "streak_state_change",
            "reasoning": "Protect the streak during a hard week",
            "confidence": 0.77,
            "parameters": {"new_streak_state": "protected", "streak_ids": ["s1"]},
        })
        decision = parse_decision(reply)
        assert decision.action == DecisionAction.STREAK_STATE_CHANGE
        assert decision.confidence == 0.77
        assert decision.parameters.new_streak_state == StreakState.PROTECTED
        assert decision.parameters.streak_ids == ["s1"]

    def test_only_first_brace_is_decoded(self) -> None:
        with pytest.raises(DecisionParseError):
            parse_decision('Options: {rest, push}. Then {"action": "no_action"}')
