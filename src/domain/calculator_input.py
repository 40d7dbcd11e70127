from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

FIELD_LABELS: dict[str, str] = {
    "currency": "Currency",
    "crypto": "Cryptocurrency",
    "investment": "Investment amount",
    "buyPrice": "Buy price",
    "sellPrice": "Sell price",
    "investmentFee": "Investment fee",
    "exitFee": "Exit fee",
}

BUY_PRICE_NOT_POSITIVE = "Buy price must be > 0"

DEFAULT_FORM_VALUES: dict[str, str] = {
    "currency": "USD",
    "crypto": "",
    "investment": "",
    "buyPrice": "",
    "sellPrice": "",
    "investmentFee": "0",
    "exitFee": "0",
}

_NUMERIC_FIELDS = ("investment", "buy_price", "sell_price", "investment_fee", "exit_fee")


class InputValidationError(ValueError):
    """Raised when calculator input is rejected.

    ``errors`` maps the camelCase field name to one message per failing field.
    """

    def __init__(self, errors: Mapping[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__("; ".join(f"{field}: {message}" for field, message in self.errors.items()))


class CalculatorInput(BaseModel):
    """Raw form values. Numeric fields stay strings until ``parse_input``."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        frozen=True,
    )

    currency: str = Field(min_length=1)
    crypto: str = Field(min_length=1)
    investment: str = Field(min_length=1)
    buy_price: str = Field(min_length=1)
    sell_price: str = Field(min_length=1)
    investment_fee: str = "0"
    exit_fee: str = "0"

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_form_value(cls, value: Any) -> Any:
        if value is None:
            return ""
        # bool is an int subclass; leave it for the str check to reject.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("investment_fee", "exit_fee")
    @classmethod
    def _default_empty_fee(cls, value: str) -> str:
        return value or "0"


@dataclass(frozen=True)
class ParsedInput:
    investment: float
    buy_price: float
    sell_price: float
    investment_fee: float
    exit_fee: float
    warnings: tuple[str, ...] = ()


def _field_alias(loc: Any) -> str:
    name = str(loc)
    field = CalculatorInput.model_fields.get(name)
    if field is not None and field.alias:
        return field.alias
    return name


def validate_input(raw: Mapping[str, Any]) -> CalculatorInput:
    """Check required fields and apply fee defaults, all-or-nothing."""
    try:
        return CalculatorInput.model_validate(raw)
    except ValidationError as exc:
        errors: dict[str, str] = {}
        for error in exc.errors():
            if not error["loc"]:
                errors["__root__"] = error["msg"]
                continue
            alias = _field_alias(error["loc"][0])
            label = FIELD_LABELS.get(alias, alias)
            if error["type"] in ("missing", "string_too_short"):
                errors.setdefault(alias, f"{label} is required")
            else:
                errors.setdefault(alias, f"{label} must be text")
        raise InputValidationError(errors) from exc


def parse_input(data: CalculatorInput) -> ParsedInput:
    """Parse the numeric strings of ``data``.

    Every field is checked before raising, so the error carries all failures.
    Negative amounts are accepted and reported as warnings.
    """
    errors: dict[str, str] = {}
    values: dict[str, float] = {}
    for name in _NUMERIC_FIELDS:
        alias = to_camel(name)
        label = FIELD_LABELS[alias]
        raw = getattr(data, name)
        try:
            # float() accepts digit separators; form values do not.
            if "_" in raw:
                raise ValueError(raw)
            value = float(raw)
        except ValueError:
            errors[alias] = f"{label} must be a number"
            continue
        if not math.isfinite(value):
            errors[alias] = f"{label} must be a finite number"
            continue
        values[name] = value

    buy_price = values.get("buy_price")
    if buy_price is not None and buy_price <= 0:
        errors["buyPrice"] = BUY_PRICE_NOT_POSITIVE

    if errors:
        raise InputValidationError(errors)

    warnings = tuple(f"{FIELD_LABELS[to_camel(name)]} is negative" for name in _NUMERIC_FIELDS if values[name] < 0)
    return ParsedInput(warnings=warnings, **values)


def validate_and_parse(raw: Mapping[str, Any]) -> ParsedInput:
    return parse_input(validate_input(raw))


__all__ = [
    "BUY_PRICE_NOT_POSITIVE",
    "CalculatorInput",
    "DEFAULT_FORM_VALUES",
    "FIELD_LABELS",
    "InputValidationError",
    "ParsedInput",
    "parse_input",
    "validate_and_parse",
    "validate_input",
]
