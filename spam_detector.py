import logging
from dataclasses import dataclass
from typing import Dict, List, NamedTuple, Optional, Tuple, Any

from reasons import Reason, format_reason
from rules import DEFAULT_RULES, ConfigurationError, RuleSet

logger = logging.getLogger(__name__)

SPAM_THRESHOLD = 60     # confidence at or above this is spam
MAX_CONFIDENCE = 100
MAX_REASONS = 5
MAX_INPUT_LENGTH = 20000


class InputTooLarge(ValueError):
    def __init__(self, length: int, limit: int):
        super().__init__(f"Message is {length} characters long, limit is {limit}")
        self.length = length
        self.limit = limit


class PassResult(NamedTuple):
    score: int
    reasons: Tuple[Reason, ...]


@dataclass(frozen=True)
class ClassificationResult:
    is_spam: bool
    confidence: int
    reasons: Tuple[Reason, ...]
    score: int

    def reason_texts(self) -> List[str]:
        return [format_reason(r) for r in self.reasons]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isSpam": self.is_spam,
            "confidence": self.confidence,
            "reasons": self.reason_texts(),
            "score": self.score,
        }


EMPTY_RESULT = ClassificationResult(is_spam=False, confidence=0, reasons=(), score=0)


def _rule_reason(rule) -> Reason:
    if rule.text is not None:
        return Reason(rule.kind, {"text": rule.text})
    return Reason(rule.kind)


class SpamDetector:
    """
    Rule-based spam scoring.

    Four independent passes (keywords, content patterns, formatting anomalies,
    message structure) each return a score and reasons. The scores are summed
    into a 0-100 confidence and anything at SPAM_THRESHOLD or above is spam.
    The detector holds no per-call state, so one instance can be shared.
    """

    def __init__(self, rules: RuleSet = DEFAULT_RULES, max_input_length: int = MAX_INPUT_LENGTH):
        if not isinstance(rules, RuleSet):
            raise ConfigurationError(f"rules must be a RuleSet, got {type(rules).__name__}")
        if not isinstance(max_input_length, int) or max_input_length <= 0:
            raise ConfigurationError(f"max_input_length must be a positive integer, got {max_input_length!r}")
        self.rules = rules
        self.max_input_length = max_input_length

    def classify(self, message_text: Optional[str]) -> ClassificationResult:
        if message_text is None:
            message_text = ""
        normalized = message_text.strip().lower()
        if not normalized:
            return EMPTY_RESULT

        if len(message_text) > self.max_input_length:
            logger.warning(f"Rejecting message of {len(message_text)} chars (limit {self.max_input_length})")
            raise InputTooLarge(len(message_text), self.max_input_length)

        # Only the keyword pass sees normalized text; the rest depend on case
        passes = (
            self.score_keywords(normalized),
            self.score_patterns(message_text),
            self.score_formatting(message_text),
            self.score_structure(message_text),
        )

        score = sum(p.score for p in passes)
        reasons = [r for p in passes for r in p.reasons]
        confidence = min(round(score), MAX_CONFIDENCE)

        result = ClassificationResult(
            is_spam=confidence >= SPAM_THRESHOLD,
            confidence=confidence,
            reasons=tuple(reasons[:MAX_REASONS]),
            score=score,
        )
        logger.debug(
            f"Classified message ({len(message_text)} chars): score={score} "
            f"confidence={confidence} spam={result.is_spam} reasons={len(reasons)}"
        )
        return result

    def score_keywords(self, normalized_text: str) -> PassResult:
        """Substring lookup of every tier's keywords, in declaration order."""
        score = 0
        found = []
        for tier in self.rules.keyword_tiers:
            for keyword in tier.keywords:
                if keyword in normalized_text:
                    score += tier.weight
                    found.append(keyword)

        reasons = []
        if found:
            reasons.append(Reason("spam_keywords", {"keywords": tuple(found[:self.rules.keywords_reported])}))

        if len(found) >= self.rules.multi_keyword_min:
            score += self.rules.multi_keyword_bonus
            reasons.append(Reason("multiple_keywords", {"count": len(found)}))

        return PassResult(score, tuple(reasons))

    def score_patterns(self, message_text: str) -> PassResult:
        score = 0
        reasons = []
        for rule in self.rules.patterns:
            if rule.pattern.search(message_text):
                score += rule.score
                reasons.append(_rule_reason(rule))
        return PassResult(score, tuple(reasons))

    def score_formatting(self, message_text: str) -> PassResult:
        score = 0
        reasons = []
        for rule in self.rules.formatting:
            matches = len(rule.pattern.findall(message_text))
            if matches:
                score += matches * rule.weight
                reasons.append(_rule_reason(rule))
        return PassResult(score, tuple(reasons))

    def score_structure(self, message_text: str) -> PassResult:
        score = 0
        reasons = []

        # Short messages that already carry keywords
        if (len(message_text) < self.rules.short_message_length
                and self.score_keywords(message_text.lower()).score > 0):
            score += self.rules.short_message_bonus
            reasons.append(Reason("short_message"))

        # URL / phone / email density
        for rule in self.rules.density:
            if len(rule.pattern.findall(message_text)) >= rule.min_count:
                score += rule.score
                reasons.append(_rule_reason(rule))

        return PassResult(score, tuple(reasons))
