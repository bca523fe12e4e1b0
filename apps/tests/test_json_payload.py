import pytest

from libs.llm.json_payload import (
    clamp_confidence,
    clamp_score,
    extract_json_payload,
    optional_bool,
    optional_str,
    strip_code_fence,
)

BARE = '{"price": "19.99", "confidence": 0.8}'


@pytest.mark.parametrize(
    "wrapped",
    [
        f"```json\n{BARE}\n```",
        f"```\n{BARE}\n```",
        f"```JSON\n{BARE}\n```",
        f"  ```json\n{BARE}\n```  \n",
        f"```json {BARE} ```",
    ],
)
def test_fenced_reply_parses_like_bare_reply(wrapped):
    assert extract_json_payload(wrapped).data == extract_json_payload(BARE).data


def test_bare_reply_parses():
    payload = extract_json_payload(BARE)
    assert payload.ok
    assert payload.error is None
    assert payload.data == {"price": "19.99", "confidence": 0.8}


@pytest.mark.parametrize("text", [None, "", "   ", "not json", "```json\n{broken\n```"])
def test_unparseable_reply_reports_error(text):
    payload = extract_json_payload(text)
    assert not payload.ok
    assert payload.data is None
    assert payload.error


def test_non_object_json_is_rejected():
    payload = extract_json_payload("[1, 2, 3]")
    assert not payload.ok
    assert "list" in payload.error


def test_strip_code_fence_leaves_unfenced_text():
    assert strip_code_fence('  {"a": 1} ') == '{"a": 1}'


class TestClampConfidence:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (0.7, 0.7),
            (1.5, 1.0),
            (-0.2, 0.0),
            ("0.3", 0.3),
            (1, 1.0),
        ],
    )
    def test_clamps_into_unit_interval(self, value, expected):
        assert clamp_confidence(value) == expected

    @pytest.mark.parametrize("value", [None, 0, "", "high", True, [0.9], float("nan")])
    def test_missing_or_unusable_uses_default(self, value):
        assert clamp_confidence(value) == 0.5
        assert clamp_confidence(value, default=0.2) == 0.2

    def test_clamp_score_keeps_zero_and_missing(self):
        assert clamp_score(0) == 0.0
        assert clamp_score(None) is None
        assert clamp_score("abc") is None
        assert clamp_score(3) == 1.0


def test_optional_helpers():
    assert optional_str(29.99) == "29.99"
    assert optional_str("  ") is None
    assert optional_str({"a": 1}) is None
    assert optional_bool(False) is False
    assert optional_bool("true") is None
