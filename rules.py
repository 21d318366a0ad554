"""
Rule data for the spam detector.

A RuleSet is an immutable value: keyword tiers, content patterns, formatting
patterns, density checks and the handful of constants the passes use. The
defaults below are the tuned production values. Hosts can inspect them with
RuleSet.to_dict() or swap pieces out with build_rules() / load_rules().
"""
import json
import logging
import re
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Pattern, Tuple

from pydantic import BaseModel, Field, ValidationError

from reasons import is_known_kind

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Rule data that cannot be used to build a detector."""


def compile_pattern(source: str, flags: int = 0) -> Pattern[str]:
    try:
        return re.compile(source, flags)
    except re.error as e:
        raise ConfigurationError(f"Invalid pattern {source!r}: {e}") from e


def _check_kind(kind: str, text: Optional[str]):
    if not kind:
        raise ConfigurationError("Rule kind must not be empty")
    if text is None and not is_known_kind(kind):
        raise ConfigurationError(f"Unknown reason kind {kind!r} needs a text")


def _check_non_negative(name: str, value: int):
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ConfigurationError(f"{name} must be a non-negative integer, got {value!r}")


@dataclass(frozen=True)
class KeywordTier:
    name: str
    weight: int
    keywords: Tuple[str, ...]

    def __post_init__(self):
        _check_non_negative(f"Weight of tier {self.name!r}", self.weight)
        for kw in self.keywords:
            if not isinstance(kw, str) or not kw:
                raise ConfigurationError(f"Tier {self.name!r} has an empty keyword")
            # matching runs against lowercased text
            if kw != kw.lower():
                raise ConfigurationError(f"Keyword {kw!r} in tier {self.name!r} must be lowercase")


@dataclass(frozen=True)
class PatternRule:
    """Content pattern. Presence-only: one match or many scores the same."""
    kind: str
    pattern: Pattern[str]
    score: int = 20
    text: Optional[str] = None

    def __post_init__(self):
        _check_kind(self.kind, self.text)
        _check_non_negative(f"Score of pattern {self.kind!r}", self.score)


@dataclass(frozen=True)
class FormattingRule:
    """Formatting anomaly. Scores weight per match, uncapped."""
    kind: str
    pattern: Pattern[str]
    weight: int = 5
    text: Optional[str] = None

    def __post_init__(self):
        _check_kind(self.kind, self.text)
        _check_non_negative(f"Weight of formatting rule {self.kind!r}", self.weight)


@dataclass(frozen=True)
class DensityRule:
    """Structural check that fires once the match count reaches min_count."""
    kind: str
    pattern: Pattern[str]
    min_count: int
    score: int
    text: Optional[str] = None

    def __post_init__(self):
        _check_kind(self.kind, self.text)
        _check_non_negative(f"Score of density rule {self.kind!r}", self.score)
        if not isinstance(self.min_count, int) or self.min_count < 1:
            raise ConfigurationError(f"min_count of density rule {self.kind!r} must be >= 1")


@dataclass(frozen=True)
class RuleSet:
    keyword_tiers: Tuple[KeywordTier, ...]
    patterns: Tuple[PatternRule, ...]
    formatting: Tuple[FormattingRule, ...]
    density: Tuple[DensityRule, ...]
    multi_keyword_min: int = 3
    multi_keyword_bonus: int = 15
    keywords_reported: int = 3
    short_message_length: int = 50
    short_message_bonus: int = 10

    def __post_init__(self):
        for name in ("multi_keyword_min", "multi_keyword_bonus", "keywords_reported",
                     "short_message_length", "short_message_bonus"):
            _check_non_negative(name, getattr(self, name))
        # 0 would award the bonus to every message
        if self.multi_keyword_min < 1:
            raise ConfigurationError("multi_keyword_min must be >= 1")

        seen = {}
        for tier in self.keyword_tiers:
            if not isinstance(tier, KeywordTier):
                raise ConfigurationError(f"Expected KeywordTier, got {type(tier).__name__}")
            for kw in tier.keywords:
                if kw in seen:
                    raise ConfigurationError(
                        f"Keyword {kw!r} appears in tiers {seen[kw]!r} and {tier.name!r}"
                    )
                seen[kw] = tier.name

        for group, cls in ((self.patterns, PatternRule),
                           (self.formatting, FormattingRule),
                           (self.density, DensityRule)):
            for rule in group:
                if not isinstance(rule, cls):
                    raise ConfigurationError(f"Expected {cls.__name__}, got {type(rule).__name__}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "keywords": {
                t.name: {"weight": t.weight, "keywords": list(t.keywords)}
                for t in self.keyword_tiers
            },
            "patterns": [
                {"kind": r.kind, "pattern": r.pattern.pattern, "score": r.score, "text": r.text}
                for r in self.patterns
            ],
            "formatting": [
                {"kind": r.kind, "pattern": r.pattern.pattern, "weight": r.weight, "text": r.text}
                for r in self.formatting
            ],
            "density": [
                {"kind": r.kind, "pattern": r.pattern.pattern, "min_count": r.min_count,
                 "score": r.score, "ignore_case": bool(r.pattern.flags & re.IGNORECASE),
                 "text": r.text}
                for r in self.density
            ],
            "multi_keyword_min": self.multi_keyword_min,
            "multi_keyword_bonus": self.multi_keyword_bonus,
            "keywords_reported": self.keywords_reported,
            "short_message_length": self.short_message_length,
            "short_message_bonus": self.short_message_bonus,
        }


HIGH_KEYWORDS = (
    "winner", "congratulations", "lottery", "prize", "jackpot",
    "million", "billion", "inheritance", "beneficiary", "urgent",
    "immediately", "act now", "limited time", "expires today",
    "click here", "click now", "free money", "easy money",
    "guaranteed", "risk free", "no risk", "investment opportunity",
    "make money fast", "work from home", "earn extra income",
    "debt free", "credit repair", "loan approved", "pre-approved",
    "viagra", "pharmacy", "prescription", "weight loss",
    "lose weight", "diet pills", "miracle cure",
)

MEDIUM_KEYWORDS = (
    "free", "offer", "deal", "discount", "save", "cheap",
    "affordable", "promotion", "special", "limited",
    "exclusive", "bonus", "gift", "reward", "cash",
    "money", "income", "profit", "earn", "win",
    "opportunity", "business", "investment", "loan",
    "credit", "mortgage", "insurance", "claim",
)

LOW_KEYWORDS = (
    "buy", "purchase", "order", "subscribe", "register",
    "sign up", "join", "membership", "account", "service",
    "product", "company", "website", "online", "internet",
    "email", "message", "notification", "alert", "update",
)

# Order matters for reason output only
CONTENT_PATTERNS = (
    ("percentage_discount", r"\b\d+%\s*(off|discount|save)\b"),
    ("money_offer", r"\$\d+(\.\d{2})?\s*(free|bonus|gift)"),
    ("phone_call_to_action", r"call\s*now\s*\d{3}[-.\s]?\d{3}[-.\s]?\d{4}"),
    ("click_request", r"click\s*(here|now|this|link)"),
    ("urgent_action", r"act\s*now\s*(!|\.){0,3}"),
    ("limited_time_offer", r"limited\s*time\s*(offer|deal)"),
    ("urgent_response", r"\b(urgent|immediate|asap)\b.*\b(action|response|reply)\b"),
    ("winner_congratulations", r"\b(congratulations?|congrats)\b.*\b(won|winner|selected)\b"),
    ("free_offer", r"\b(free|no\s*cost).*\b(trial|sample|gift|bonus)\b"),
    ("large_money_amount", r"\bmillion\s*(dollar|pound|euro)s?\b"),
)

FORMATTING_PATTERNS = (
    ("excessive_caps", r"[A-Z]{5,}"),
    ("multiple_exclamations", r"!{3,}"),
    ("multiple_dollar_signs", r"\${2,}"),
    ("excessive_emphasis", r"\*{2,}"),
    ("multiple_hash_symbols", r"#{2,}"),
)

URL_PATTERN = r"(https?://[^\s]+)"
PHONE_PATTERN = r"\b\d{3}[-.\s]?\d{3}[-.\s]?\d{4}\b"
EMAIL_PATTERN = r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b"

DEFAULT_RULES = RuleSet(
    keyword_tiers=(
        KeywordTier("high", 25, HIGH_KEYWORDS),
        KeywordTier("medium", 10, MEDIUM_KEYWORDS),
        KeywordTier("low", 3, LOW_KEYWORDS),
    ),
    patterns=tuple(
        PatternRule(kind, compile_pattern(src, re.IGNORECASE))
        for kind, src in CONTENT_PATTERNS
    ),
    formatting=tuple(
        FormattingRule(kind, compile_pattern(src))
        for kind, src in FORMATTING_PATTERNS
    ),
    density=(
        DensityRule("multiple_urls", compile_pattern(URL_PATTERN, re.IGNORECASE), min_count=3, score=15),
        DensityRule("phone_number", compile_pattern(PHONE_PATTERN), min_count=1, score=8),
        DensityRule("multiple_emails", compile_pattern(EMAIL_PATTERN), min_count=2, score=10),
    ),
)


# Override file schema

class KeywordTierSpec(BaseModel):
    weight: int = Field(ge=0)
    keywords: List[str]

class PatternSpec(BaseModel):
    kind: str
    pattern: str
    score: int = Field(default=20, ge=0)
    text: Optional[str] = None

class FormattingSpec(BaseModel):
    kind: str
    pattern: str
    weight: int = Field(default=5, ge=0)
    text: Optional[str] = None

class DensitySpec(BaseModel):
    kind: str
    pattern: str
    min_count: int = Field(ge=1)
    score: int = Field(ge=0)
    ignore_case: bool = False
    text: Optional[str] = None

class RulesOverride(BaseModel):
    keywords: Optional[Dict[str, KeywordTierSpec]] = None
    patterns: Optional[List[PatternSpec]] = None
    formatting: Optional[List[FormattingSpec]] = None
    density: Optional[List[DensitySpec]] = None
    multi_keyword_min: Optional[int] = Field(default=None, ge=1)
    multi_keyword_bonus: Optional[int] = Field(default=None, ge=0)
    keywords_reported: Optional[int] = Field(default=None, ge=0)
    short_message_length: Optional[int] = Field(default=None, ge=0)
    short_message_bonus: Optional[int] = Field(default=None, ge=0)


def build_rules(data: Mapping[str, Any], base: RuleSet = DEFAULT_RULES) -> RuleSet:
    """
    Build a RuleSet from plain data. Sections left out keep the values of `base`.
    Raises ConfigurationError on anything that would not score sensibly.
    """
    try:
        override = RulesOverride.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid rule data: {e}") from e

    changes = {}
    if override.keywords is not None:
        changes["keyword_tiers"] = tuple(
            KeywordTier(name, spec.weight, tuple(spec.keywords))
            for name, spec in override.keywords.items()
        )
    if override.patterns is not None:
        changes["patterns"] = tuple(
            PatternRule(p.kind, compile_pattern(p.pattern, re.IGNORECASE), p.score, p.text)
            for p in override.patterns
        )
    if override.formatting is not None:
        changes["formatting"] = tuple(
            FormattingRule(f.kind, compile_pattern(f.pattern), f.weight, f.text)
            for f in override.formatting
        )
    if override.density is not None:
        changes["density"] = tuple(
            DensityRule(
                d.kind,
                compile_pattern(d.pattern, re.IGNORECASE if d.ignore_case else 0),
                d.min_count,
                d.score,
                d.text,
            )
            for d in override.density
        )
    for name in ("multi_keyword_min", "multi_keyword_bonus", "keywords_reported",
                 "short_message_length", "short_message_bonus"):
        value = getattr(override, name)
        if value is not None:
            changes[name] = value

    return replace(base, **changes)


def load_rules(path: str, base: RuleSet = DEFAULT_RULES) -> RuleSet:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Rules file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Rules file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Rules file {path} must hold a JSON object")

    rules = build_rules(data, base)
    logger.info(f"Loaded rule overrides from {path}: {', '.join(sorted(data)) or 'none'}")
    return rules
