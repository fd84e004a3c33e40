"""Amount parsing shared by validation and the transaction store.

There is exactly one definition of a valid number in fintrack: whatever
parse_amount accepts. Both the validator and the store consume it.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from fintrack.domain.models import Amount


@dataclass(frozen=True)
class ParsedAmount:
    """Immutable amount parse result.

    Exactly one of value and error is set.
    """

    value: Amount | None
    error: str | None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_amount(raw: object) -> ParsedAmount:
    """Parse a raw amount into a finite Decimal.

    Accepts strings (surrounding whitespace and thousands separators are
    ignored), ints, floats and Decimals. Booleans are rejected.

    Args:
        raw: Raw amount value.

    Returns:
        ParsedAmount with either a value or an error message.
    """
    if raw is None or isinstance(raw, bool):
        return ParsedAmount(value=None, error="Amount is required")

    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, int):
        value = Decimal(raw)
    elif isinstance(raw, float):
        # Go through repr so 0.1 becomes Decimal("0.1"), not its binary expansion
        value = Decimal(repr(raw))
    elif isinstance(raw, str):
        text = raw.strip().replace(",", "")
        if not text:
            return ParsedAmount(value=None, error="Amount is required")
        try:
            value = Decimal(text)
        except InvalidOperation:
            return ParsedAmount(value=None, error="Amount must be a number")
    else:
        return ParsedAmount(value=None, error="Amount must be a number")

    if not value.is_finite():
        return ParsedAmount(value=None, error="Amount must be a finite number")

    return ParsedAmount(value=Amount(value), error=None)
