import pytest

from reasons import Reason, describe_result, format_reason, is_known_kind
from spam_detector import ClassificationResult


def test_format_keyword_reason():
    reason = Reason("spam_keywords", {"keywords": ("winner", "prize", "urgent")})
    assert format_reason(reason) == "Contains spam keywords: winner, prize, urgent"


def test_format_count_reason():
    assert format_reason(Reason("multiple_keywords", {"count": 7})) == "Multiple spam keywords detected (7)"


def test_format_fixed_reason():
    assert format_reason(Reason("winner_congratulations")) == "Contains winner/congratulations pattern"
    assert format_reason(Reason("multiple_urls")) == "Contains multiple URLs"


def test_format_custom_reason():
    assert format_reason(Reason("my_rule", {"text": "Looks like a crypto scam"})) == "Looks like a crypto scam"
    assert not is_known_kind("my_rule")


def test_describe_spam_with_reasons():
    result = ClassificationResult(
        is_spam=True, confidence=80, score=80,
        reasons=(Reason("click_request"), Reason("phone_number")),
    )
    assert describe_result(result) == (
        "This message appears to be spam. Contains suspicious click request. Contains phone number."
    )


def test_describe_spam_without_reasons():
    result = ClassificationResult(is_spam=True, confidence=60, score=60, reasons=())
    assert describe_result(result) == "This message contains characteristics commonly found in spam messages."


def test_describe_promotional():
    result = ClassificationResult(is_spam=False, confidence=31, score=31, reasons=(Reason("multiple_keywords", {"count": 3}),))
    assert "promotional language" in describe_result(result)


def test_describe_safe():
    result = ClassificationResult(is_spam=False, confidence=30, score=30, reasons=())
    assert describe_result(result) == "This message appears to be safe and legitimate."


def test_reason_params_are_frozen():
    params = {"count": 3}
    reason = Reason("multiple_keywords", params)
    params["count"] = 9
    assert reason.params["count"] == 3
    assert reason == Reason("multiple_keywords", {"count": 3})
    assert hash(reason) == hash(Reason("multiple_keywords", {"count": 3}))
    with pytest.raises(TypeError):
        reason.params["count"] = 4
