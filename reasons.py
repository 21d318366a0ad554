from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

# Reason kind -> display template
REASON_TEXTS = {
    # keyword pass
    "spam_keywords": "Contains spam keywords: {keywords}",
    "multiple_keywords": "Multiple spam keywords detected ({count})",
    # pattern pass
    "percentage_discount": "Contains percentage discount pattern",
    "money_offer": "Contains money offer pattern",
    "phone_call_to_action": "Contains phone number with call-to-action",
    "click_request": "Contains suspicious click request",
    "urgent_action": "Contains urgent action request",
    "limited_time_offer": "Contains limited time offer",
    "urgent_response": "Contains urgent response request",
    "winner_congratulations": "Contains winner/congratulations pattern",
    "free_offer": "Contains free offer pattern",
    "large_money_amount": "Contains large money amount",
    # formatting pass
    "excessive_caps": "Excessive use of capital letters",
    "multiple_exclamations": "Multiple exclamation marks",
    "multiple_dollar_signs": "Multiple dollar signs",
    "excessive_emphasis": "Excessive asterisks or emphasis",
    "multiple_hash_symbols": "Multiple hash symbols",
    # structural pass
    "short_message": "Short message with spam indicators",
    "multiple_urls": "Contains multiple URLs",
    "phone_number": "Contains phone number",
    "multiple_emails": "Contains multiple email addresses",
}


@dataclass(frozen=True)
class Reason:
    """Why a scoring pass added to the score. Rendered by format_reason()."""
    kind: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def __hash__(self):
        return hash((self.kind, tuple(sorted(self.params.items()))))


def is_known_kind(kind: str) -> bool:
    return kind in REASON_TEXTS


def format_reason(reason: Reason) -> str:
    # Custom rules carry their own wording in params["text"]
    template = REASON_TEXTS.get(reason.kind, "{text}")
    values = {}
    for key, value in reason.params.items():
        if isinstance(value, (list, tuple)):
            value = ", ".join(str(v) for v in value)
        values[key] = value
    return template.format(**values)


def describe_result(result) -> str:
    """
    One-sentence verdict for a ClassificationResult, as shown on the result card.
    """
    if result.is_spam:
        if result.reasons:
            return f"This message appears to be spam. {'. '.join(result.reason_texts())}."
        return "This message contains characteristics commonly found in spam messages."
    if result.confidence > 30:
        return "This message appears to be legitimate, though it contains some promotional language."
    return "This message appears to be safe and legitimate."
