"""Numeric coercion for utility capacities, using Pint for unit conversion."""

import math
import re
from typing import Any, Dict, Optional, Tuple
from pint import UnitRegistry

from .schema import STEAM_UNIT

# Initialize Pint unit registry with the plant utility units
ureg = UnitRegistry()
ureg.define("tonne_per_hour = tonne / hour")
ureg.define("ton_refrigeration = 12000 * british_thermal_unit / hour")

# Leading number of a cell, optionally with thousands separators, then the rest
_NUMBER_RE = re.compile(
    r"^\s*([-+]?(?:(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)\s*(.*?)\s*$",
    re.DOTALL,
)

# Unit words in a capacity cell ("5 TPH", "300 TR (chiller)")
_UNIT_TOKEN_RE = re.compile(r"[A-Z/]+")

STEAM_TOKENS = {"TPH", "T/H", "T/HR"}


class UnitNormalizer:
    """Coerces raw spreadsheet values to floats in a canonical capacity unit."""

    # Spellings seen in energy balance sheets, keyed lowercase.
    # "mw" is megawatt here; nobody rates plant utilities in milliwatts.
    UNIT_ALIASES = {
        "tph": "tonne_per_hour",
        "t/h": "tonne_per_hour",
        "t/hr": "tonne_per_hour",
        "tonne/h": "tonne_per_hour",
        "tonnes/h": "tonne_per_hour",
        "kg/h": "kilogram / hour",
        "kg/hr": "kilogram / hour",
        "w": "watt",
        "kw": "kilowatt",
        "mw": "megawatt",
        "hp": "horsepower",
        "tr": "ton_refrigeration",
        "kcal/h": "kilocalorie / hour",
        "kcal/hr": "kilocalorie / hour",
    }

    def __init__(self):
        """Initialize the unit normalizer."""
        self.ureg = ureg

    def split_number(self, value: Any) -> Tuple[Optional[float], str]:
        """Split a raw value into its leading number and trailing unit text.

        Returns (None, "") when the value has no leading number.
        """
        if value is None or isinstance(value, bool):
            return None, ""

        if isinstance(value, (int, float)):
            number = float(value)
            return (number if math.isfinite(number) else None), ""

        match = _NUMBER_RE.match(str(value))
        if not match:
            return None, ""

        number = float(match.group(1).replace(",", ""))
        if not math.isfinite(number):
            return None, ""
        return number, match.group(2)

    def convert(self, magnitude: float, unit_text: str, target: str) -> Optional[float]:
        """Convert magnitude expressed in unit_text to the target unit.

        Returns None if the unit is unknown or not compatible with target.
        """
        expression = self.UNIT_ALIASES.get(unit_text.strip().lower(), unit_text)
        try:
            quantity = self.ureg.Quantity(magnitude, expression)
            return float(quantity.to(target).magnitude)
        except Exception:
            return None

    def coerce(self, value: Any, unit: Optional[str] = None) -> Optional[float]:
        """Coerce a raw cell value to a float, or None if it has no number.

        Examples:
            coerce(5) -> 5.0
            coerce("5.5 TPH", STEAM_UNIT) -> 5.5
            coerce("500 kg/h", STEAM_UNIT) -> 0.5
            coerce("1 MW", "kilowatt") -> 1000.0
            coerce("12 widgets", STEAM_UNIT) -> 12.0  # unknown suffix keeps the number
            coerce("n/a") -> None
        """
        number, unit_text = self.split_number(value)
        if number is None:
            return None

        if unit and unit_text:
            converted = self.convert(number, unit_text, unit)
            if converted is not None:
                return converted

        return number

    def split_capacity(
        self,
        tag: Optional[str],
        description: Optional[str],
        capacity: Any
    ) -> Dict[str, float]:
        """Route a single free-text capacity column to the matching load field.

        "5 TPH" is a steam load. A TR rating goes to cooling for cooling
        towers (tag contains CT), otherwise to chilled water for chillers
        (tag contains CHW). Anything else in TR is assumed to be cooling.
        Unit words are matched whole, so "15 kW electric" routes nowhere.

        Returns a dict with at most one of max_steam_load, max_cooling_load,
        max_chilled_water_load.
        """
        number, unit_text = self.split_number(capacity)
        if number is None:
            return {}

        tokens = set(_UNIT_TOKEN_RE.findall(unit_text.upper()))
        tag_upper = (tag or "").upper()
        description_lower = (description or "").lower()

        if tokens & STEAM_TOKENS:
            return {"max_steam_load": self.coerce(capacity, STEAM_UNIT)}

        if "TR" in tokens:
            if "CT" in tag_upper or "cooling tower" in description_lower:
                return {"max_cooling_load": number}
            if "CHW" in tag_upper or "chiller" in description_lower:
                return {"max_chilled_water_load": number}
            return {"max_cooling_load": number}

        return {}
