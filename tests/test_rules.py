import dataclasses
import json

import pytest

from rules import (
    DEFAULT_RULES, ConfigurationError, KeywordTier, RuleSet, build_rules, load_rules,
)
from spam_detector import SpamDetector


def test_default_tiers():
    tiers = [(t.name, t.weight) for t in DEFAULT_RULES.keyword_tiers]
    assert tiers == [("high", 25), ("medium", 10), ("low", 3)]
    assert DEFAULT_RULES.keyword_tiers[0].keywords[:3] == ("winner", "congratulations", "lottery")


def test_default_patterns_in_order():
    assert [p.kind for p in DEFAULT_RULES.patterns] == [
        "percentage_discount", "money_offer", "phone_call_to_action", "click_request",
        "urgent_action", "limited_time_offer", "urgent_response", "winner_congratulations",
        "free_offer", "large_money_amount",
    ]
    assert {p.score for p in DEFAULT_RULES.patterns} == {20}
    assert {f.weight for f in DEFAULT_RULES.formatting} == {5}


def test_default_density_thresholds():
    assert [(d.kind, d.min_count, d.score) for d in DEFAULT_RULES.density] == [
        ("multiple_urls", 3, 15),
        ("phone_number", 1, 8),
        ("multiple_emails", 2, 10),
    ]


def test_rules_are_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_RULES.short_message_length = 10
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_RULES.keyword_tiers[0].weight = 100


def test_partial_override_keeps_the_rest():
    rules = build_rules({"short_message_length": 10, "multi_keyword_bonus": 0})
    assert rules.short_message_length == 10
    assert rules.multi_keyword_bonus == 0
    assert rules.patterns is DEFAULT_RULES.patterns
    assert rules.keyword_tiers is DEFAULT_RULES.keyword_tiers
    # base is untouched
    assert DEFAULT_RULES.short_message_length == 50


def test_keyword_override_changes_scoring():
    rules = build_rules({"keywords": {"custom": {"weight": 70, "keywords": ["bitcoin"]}}})
    detector = SpamDetector(rules)

    result = detector.classify("Send bitcoin to this address please, we will double it tonight")
    assert result.score == 70
    assert result.is_spam
    assert detector.classify("winner").score == 0


def test_custom_pattern_with_text():
    rules = build_rules({"patterns": [
        {"kind": "crypto_doubling", "pattern": r"double\s+your\s+(btc|bitcoin)", "text": "Promises to double crypto"},
    ]})
    result = SpamDetector(rules).classify("DOUBLE YOUR BTC today, trust me, this is a totally real offer")

    assert "Promises to double crypto" in result.reason_texts()


@pytest.mark.parametrize("data", [
    {"keywords": {"high": {"weight": 25, "keywords": ["Winner"]}}},
    {"keywords": {"high": {"weight": 25, "keywords": [""]}}},
    {"keywords": {"high": {"weight": -1, "keywords": ["winner"]}}},
    {"keywords": {"a": {"weight": 1, "keywords": ["free"]}, "b": {"weight": 2, "keywords": ["free"]}}},
    {"patterns": [{"kind": "click_request", "pattern": "click(here"}]},
    {"patterns": [{"kind": "made_up_kind", "pattern": "x"}]},
    {"formatting": [{"kind": "excessive_caps", "pattern": "[A-Z]{5,}", "weight": -5}]},
    {"density": [{"kind": "phone_number", "pattern": r"\d+", "min_count": 0, "score": 8}]},
    {"short_message_length": -1},
    {"multi_keyword_min": 0},
    {"patterns": "not a list"},
])
def test_bad_rule_data(data):
    with pytest.raises(ConfigurationError):
        build_rules(data)


def test_ruleset_rejects_wrong_rule_types():
    with pytest.raises(ConfigurationError):
        RuleSet(keyword_tiers=("high",), patterns=(), formatting=(), density=())


def test_keyword_tier_rejects_uppercase():
    with pytest.raises(ConfigurationError):
        KeywordTier("high", 25, ("FREE",))


def test_to_dict_round_trip():
    data = DEFAULT_RULES.to_dict()
    assert data["keywords"]["medium"]["weight"] == 10
    assert data["density"][0]["ignore_case"] is True

    rebuilt = build_rules(json.loads(json.dumps(data)))
    assert rebuilt.to_dict() == data


def test_load_rules(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps({"short_message_bonus": 20}), encoding="utf-8")

    rules = load_rules(str(path))
    assert rules.short_message_bonus == 20
    assert SpamDetector(rules).score_structure("Free gift inside").score == 20


def test_load_rules_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_rules(str(tmp_path / "nope.json"))


def test_load_rules_bad_json(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_rules(str(path))


def test_load_rules_not_an_object(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_rules(str(path))


def test_multi_keyword_min_must_be_positive():
    with pytest.raises(ConfigurationError):
        dataclasses.replace(DEFAULT_RULES, multi_keyword_min=0)
    assert build_rules({"multi_keyword_min": 1}).multi_keyword_min == 1
