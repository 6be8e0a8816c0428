import re
from dataclasses import dataclass, field
from decimal import Decimal, DecimalException, InvalidOperation, ROUND_CEILING

from .exceptions import QuantityParseError


BINARY_SUFFIXES = {
    "Ki": Decimal(2) ** 10,
    "Mi": Decimal(2) ** 20,
    "Gi": Decimal(2) ** 30,
    "Ti": Decimal(2) ** 40,
    "Pi": Decimal(2) ** 50,
    "Ei": Decimal(2) ** 60,
}

DECIMAL_SUFFIXES = {
    "n": Decimal("1e-9"),
    "u": Decimal("1e-6"),
    "m": Decimal("1e-3"),
    "": Decimal(1),
    "k": Decimal("1e3"),
    "K": Decimal("1e3"),
    "M": Decimal("1e6"),
    "G": Decimal("1e9"),
    "T": Decimal("1e12"),
    "P": Decimal("1e15"),
    "E": Decimal("1e18"),
}

# Exponent form is tried before the bare "E" (exa) suffix, so "1E3" is 1000 and "1E" is 10**18.
QUANTITY_RE = re.compile(
    r"(?P<number>[+-]?(?:\d+(?:\.\d*)?|\.\d+))"
    r"(?P<suffix>[eE][+-]?\d+|[KMGTPE]i|[numkKMGTPE])?"
)


@dataclass(frozen=True)
class Quantity:
    """
    Resource amount as written in a pod spec, e.g. '100m', '2G', '2Gi'.
    Quantities are compared by numeric value; str() gives back the original text.
    """

    value: Decimal
    text: str = field(compare=False)

    def __str__(self):
        return self.text

    def __repr__(self):
        return f"Quantity({self.text!r})"

    def __int__(self):
        return int(self.value.to_integral_value(rounding=ROUND_CEILING))

    def __float__(self):
        return float(self.value)

    @property
    def milli_value(self) -> int:
        return int((self.value * 1000).to_integral_value(rounding=ROUND_CEILING))


def parse_quantity(text: str) -> Quantity:
    """Parse quantity string. Raise `QuantityParseError` if `text` doesn't follow quantity grammar."""
    if not isinstance(text, str):
        raise QuantityParseError(text=text, reason="not a string")
    if not (match := QUANTITY_RE.fullmatch(text)):
        raise QuantityParseError(text=text, reason="unknown format")

    number, suffix = match.group("number"), match.group("suffix") or ""
    try:
        value = Decimal(number)
    except InvalidOperation:
        raise QuantityParseError(text=text, reason="invalid number") from None

    try:
        if suffix in BINARY_SUFFIXES:
            value *= BINARY_SUFFIXES[suffix]
        elif suffix in DECIMAL_SUFFIXES:
            value *= DECIMAL_SUFFIXES[suffix]
        else:
            value = value.scaleb(int(suffix[1:]))
    except (DecimalException, ValueError):
        raise QuantityParseError(text=text, reason="out of range") from None
    return Quantity(value=value, text=text)
