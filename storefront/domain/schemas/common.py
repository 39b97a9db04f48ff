"""
Building blocks shared by the per-source record schemas.

Every validated record is a frozen pydantic model. Absent lists become empty
lists and nullable fields are explicitly ``None`` so downstream mapping never
has to probe for missing keys.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints, field_validator

CENT = Decimal("0.01")

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}

# Symbol to ISO code, longest symbols first so "A$" wins over "$"
SYMBOL_CURRENCIES = (
    ("A$", "AUD"),
    ("C$", "CAD"),
    ("$", "USD"),
    ("€", "EUR"),
    ("£", "GBP"),
    ("¥", "JPY"),
)

_AMOUNT_PATTERN = re.compile(r"\d[\d,]*(?:\.\d+)?")


def _coerce_identifier(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("identifier must be a string or integer")
    if isinstance(value, int):
        return str(value)
    return value


def _none_to_empty_list(value: Any) -> Any:
    return [] if value is None else value


def _none_to_empty_text(value: Any) -> Any:
    return "" if value is None else value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


Identifier = Annotated[
    str,
    BeforeValidator(_coerce_identifier),
    StringConstraints(strip_whitespace=True, min_length=1),
]
Text = Annotated[str, BeforeValidator(_none_to_empty_text)]
OptionalStr = Annotated[Optional[str], BeforeValidator(_blank_to_none)]


class Record(BaseModel):
    """Base for immutable validated records; unexpected fields are dropped."""
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class Price(Record):
    """Price in major currency units with an optional upstream-formatted string."""

    amount: Decimal
    currency: str = "USD"
    formatted: Optional[str] = None

    @field_validator("currency", mode="before")
    @classmethod
    def normalize_currency(cls, v: Any) -> Any:
        if v is None:
            return "USD"
        if isinstance(v, str):
            return v.strip().upper() or "USD"
        return v

    @field_validator("amount")
    @classmethod
    def quantize_amount(cls, v: Decimal) -> Decimal:
        return v.quantize(CENT, rounding=ROUND_HALF_UP)

    @classmethod
    def from_minor_units(cls, cents: int, currency: Optional[str] = None,
                         formatted: Optional[str] = None) -> "Price":
        """Build a price from an amount in cents."""
        return cls(amount=Decimal(cents) / 100, currency=currency, formatted=formatted)

    @classmethod
    def from_formatted(cls, formatted: str, currency: Optional[str] = None) -> Optional["Price"]:
        """Parse a display string such as ``"$9.99"``; None when no amount is found."""
        match = _AMOUNT_PATTERN.search(formatted)
        if not match:
            return None
        try:
            amount = Decimal(match.group(0).replace(",", ""))
        except InvalidOperation:
            return None
        return cls(amount=amount, currency=currency or currency_from_symbol(formatted), formatted=formatted)

    def format(self, suffix: str = "") -> str:
        """Format locally, e.g. ``$19.99`` or ``12.00 CAD``."""
        symbol = CURRENCY_SYMBOLS.get(self.currency)
        if symbol:
            return f"{symbol}{self.amount:.2f}{suffix}"
        return f"{self.amount:.2f} {self.currency}{suffix}"

    def display(self, suffix: str = "") -> str:
        """Upstream-formatted string when provided, local formatting otherwise."""
        if self.formatted:
            return self.formatted
        return self.format(suffix)


def currency_from_symbol(formatted: str, default: str = "USD") -> str:
    """Guess an ISO currency code from the symbol in a formatted price."""
    for symbol, code in SYMBOL_CURRENCIES:
        if symbol in formatted:
            return code
    return default


class ProductImage(Record):
    url: str = Field(min_length=1)
    width: Optional[int] = None
    height: Optional[int] = None


def image_entries(value: Any) -> Any:
    """Drop image entries that carry no URL; keep order otherwise."""
    if value is None:
        return []
    if not isinstance(value, list):
        return value
    return [item for item in value if isinstance(item, dict) and item.get("url")]


class ColorAttribute(Record):
    name: str
    swatch: Optional[str] = None


class SizeAttribute(Record):
    name: str


class VariantAttributes(BaseModel):
    """Attribute bag of a variant; unknown keys are kept for downstream use."""
    model_config = ConfigDict(frozen=True, extra="allow")

    description: Optional[str] = None
    color: Optional[ColorAttribute] = None
    size: Optional[SizeAttribute] = None

    @property
    def extra(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


def _coerce_stock(value: Any) -> Any:
    # Fourthwall reports {"type": "UNLIMITED"} or {"type": "LIMITED", "inStock": n}
    if isinstance(value, dict):
        if str(value.get("type", "")).upper() == "UNLIMITED":
            return None
        return value.get("inStock", value.get("in_stock"))
    return value


class ProductVariant(Record):
    id: Identifier
    name: Text = ""
    price: Optional[Price] = None
    attributes: VariantAttributes = Field(default_factory=VariantAttributes)
    stock: Annotated[Optional[int], BeforeValidator(_coerce_stock)] = None

    @field_validator("attributes", mode="before")
    @classmethod
    def default_attributes(cls, v: Any) -> Any:
        return {} if v is None else v

    @property
    def in_stock(self) -> bool:
        """Untracked stock counts as available."""
        return self.stock is None or self.stock > 0


NullableList = BeforeValidator(_none_to_empty_list)
ImageList = Annotated[List[ProductImage], BeforeValidator(image_entries)]
VariantList = Annotated[List[ProductVariant], NullableList]
