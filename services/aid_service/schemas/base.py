"""Shared schema building blocks."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

MAX_AMOUNT = Decimal("99999999.99")  # NUMERIC(10, 2)
CENTS = Decimal("0.01")


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; both accepted as input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def parse_amount(value: Any) -> Decimal:
    """Parse a positive money amount from a numeric string and round to 2 dp."""
    if isinstance(value, bool) or value is None:
        raise ValueError("Please enter an amount")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError("Please enter an amount")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValueError("Please enter a valid positive amount")
    if not amount.is_finite() or amount <= 0:
        raise ValueError("Please enter a valid positive amount")
    amount = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    if amount <= 0:
        raise ValueError("Please enter a valid positive amount")
    if amount > MAX_AMOUNT:
        raise ValueError(f"Amount cannot exceed {MAX_AMOUNT}")
    return amount


def format_money(value: Decimal) -> str:
    return str(Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP))


# Request-side amount: "250", 250, "250.5" -> Decimal("250.00")
AmountInput = Annotated[Decimal, BeforeValidator(parse_amount)]

# Response-side amount: always a 2 dp string, e.g. "250.00"
Money = Annotated[Decimal, PlainSerializer(format_money, return_type=str)]
