"""
Shared field types for fintrack models.

Raw input arrives untyped (usually straight from a request body), so money
and dates come in as strings. These annotated types turn them into Decimal
and datetime values and report failures with stable error types:

- required:          missing, null, or an empty/whitespace-only string
- invalid_type:      wrong kind of value (e.g. a float for a money amount)
- invalid_format:    not parseable as a decimal number or ISO 8601 date
- invalid_precision: more fractional digits than storage keeps
- out_of_range:      zero, negative, or too large for storage
"""

import re
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BeforeValidator, Field
from pydantic_core import PydanticCustomError


# Storage precision for money columns: numeric(12, 2)
MONEY_MAX_DIGITS = 12
MONEY_DECIMAL_PLACES = 2
MONEY_QUANTUM = Decimal(1).scaleb(-MONEY_DECIMAL_PLACES)

# Digits with an optional fraction; the sign is allowed so negatives report out_of_range
_PLAIN_DECIMAL = re.compile(r"^-?\d+(\.\d+)?$")


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def _required() -> PydanticCustomError:
    return PydanticCustomError("required", "This field is required")


def require_value(value: Any) -> Any:
    """Reject None and blank strings before type validation runs."""
    if value is None:
        raise _required()
    if isinstance(value, str) and not value.strip():
        raise _required()
    return value


def require_secret(value: Any) -> Any:
    """Like require_value, but whitespace counts as content (passwords)."""
    if value is None or value == "":
        raise _required()
    return value


def parse_amount(value: Any) -> Decimal:
    """
    Parse a positive money amount.

    Accepts decimal strings ("420.00", "12.5") or Decimal instances.
    Floats are rejected: they cannot carry an exact 2-place amount.
    """
    value = require_value(value)

    if isinstance(value, bool) or not isinstance(value, (str, Decimal)):
        raise PydanticCustomError(
            "invalid_type",
            'Must be a decimal string such as "420.00"',
        )

    if isinstance(value, str) and not _PLAIN_DECIMAL.match(value.strip()):
        raise PydanticCustomError(
            "invalid_format",
            'Must be a plain decimal number such as "420.00", got \'{value}\'',
            {"value": value},
        )

    amount = Decimal(value.strip()) if isinstance(value, str) else value

    if not amount.is_finite():
        raise PydanticCustomError(
            "invalid_format",
            "Must be a finite decimal number, got '{value}'",
            {"value": str(value)},
        )

    if amount <= 0:
        raise PydanticCustomError("out_of_range", "Must be greater than zero")

    if amount.normalize().as_tuple().exponent < -MONEY_DECIMAL_PLACES:
        raise PydanticCustomError(
            "invalid_precision",
            "Must have at most {places} decimal places",
            {"places": MONEY_DECIMAL_PLACES},
        )

    integer_digits = MONEY_MAX_DIGITS - MONEY_DECIMAL_PLACES
    if amount.adjusted() >= integer_digits:
        raise PydanticCustomError(
            "out_of_range",
            "Must be less than {limit}",
            {"limit": 10 ** integer_digits},
        )

    return amount.quantize(MONEY_QUANTUM)


def parse_timestamp(value: Any) -> datetime:
    """
    Parse an ISO 8601 date or timestamp string into a datetime.

    Date-only strings ("2024-10-05") become midnight of that day.
    """
    value = require_value(value)

    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if not isinstance(value, str):
        raise PydanticCustomError("invalid_type", "Must be a date string")

    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        raise PydanticCustomError(
            "invalid_date",
            "Must be an ISO 8601 date or timestamp, got '{value}'",
            {"value": value},
        ) from None


def parse_calendar_date(value: Any) -> date:
    """Parse a date string (or timestamp string) into a calendar date."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return parse_timestamp(value).date()


Required = BeforeValidator(require_value)

RequiredText = Annotated[str, Required, Field(min_length=1)]
PositiveAmount = Annotated[Decimal, BeforeValidator(parse_amount)]
IsoDateTime = Annotated[datetime, BeforeValidator(parse_timestamp)]
IsoDate = Annotated[date, BeforeValidator(parse_calendar_date)]

# Stored money values (already validated once on the way in)
PositiveMoney = Annotated[
    Decimal,
    Field(gt=0, max_digits=MONEY_MAX_DIGITS, decimal_places=MONEY_DECIMAL_PLACES),
]
NonNegativeMoney = Annotated[
    Decimal,
    Field(ge=0, max_digits=MONEY_MAX_DIGITS, decimal_places=MONEY_DECIMAL_PLACES),
]
