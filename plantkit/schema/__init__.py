"""Canonical field definitions and raw column aliases for each ingestion path."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

TEXT = "text"
NUMERIC = "numeric"


@dataclass(frozen=True)
class FieldSpec:
    """
    How one logical field is found in a raw row.

    aliases are tried in declared order; the first raw label present with a
    non-missing value wins. unit is the canonical unit numeric values are
    converted to when the raw text carries a recognisable unit suffix.
    """
    kind: str
    aliases: List[str] = field(default_factory=list)
    unit: Optional[str] = None


# Canonical capacity units (pint expressions, see unit_normalizer)
STEAM_UNIT = "tonne_per_hour"
POWER_UNIT = "kilowatt"
COOLING_UNIT = "ton_refrigeration"
CHILLED_WATER_UNIT = "ton_refrigeration"

# Equipment capacity fields in store order
EQUIPMENT_LOAD_FIELDS = [
    "max_steam_load",
    "max_power_load",
    "max_cooling_load",
    "max_chilled_water_load",
]

# Recipe step requirement fields in store order
STEP_REQUIREMENT_FIELDS = [
    "steam_required",
    "power_required",
    "cooling_required",
    "chilled_water_required",
]

# Energy balance sheet -> equipment
EQUIPMENT_FIELDS: Dict[str, FieldSpec] = {
    "tag": FieldSpec(TEXT, ["Tag", "Equipment Tag", "Equipment_Tag", "EQPT."]),
    "name": FieldSpec(TEXT, ["Name", "Description"]),
    "capacity": FieldSpec(TEXT, ["Capacity", "CAPACITY / H.T.A."]),
    "max_steam_load": FieldSpec(
        NUMERIC, ["Max Steam Load", "Steam Load", "Steam_Load"], STEAM_UNIT
    ),
    "max_power_load": FieldSpec(
        NUMERIC, ["Max Power Load", "Power Load", "Power_Load"], POWER_UNIT
    ),
    "max_cooling_load": FieldSpec(NUMERIC, ["Max Cooling Load"], COOLING_UNIT),
    "max_chilled_water_load": FieldSpec(
        NUMERIC, ["Max Chilled Water Load"], CHILLED_WATER_UNIT
    ),
}

# Heat calculation sheet -> recipe step requirements
UTILITY_REQUIREMENT_FIELDS: Dict[str, FieldSpec] = {
    "step_name": FieldSpec(TEXT, ["Step Name", "Operation", "Step", "PROCESS STEPS"]),
    "steam_required": FieldSpec(
        NUMERIC, ["Steam Required", "Steam", "L. P. Steam (Peak Load)"], STEAM_UNIT
    ),
    "power_required": FieldSpec(NUMERIC, ["Power Required", "Power"], POWER_UNIT),
    "cooling_required": FieldSpec(
        NUMERIC, ["Cooling Required", "Cooling", "Cooling Water"], COOLING_UNIT
    ),
    "chilled_water_required": FieldSpec(
        NUMERIC, ["Chilled Water Required", "Chilled Water"], CHILLED_WATER_UNIT
    ),
}

__all__ = [
    "TEXT",
    "NUMERIC",
    "FieldSpec",
    "STEAM_UNIT",
    "POWER_UNIT",
    "COOLING_UNIT",
    "CHILLED_WATER_UNIT",
    "EQUIPMENT_LOAD_FIELDS",
    "STEP_REQUIREMENT_FIELDS",
    "EQUIPMENT_FIELDS",
    "UTILITY_REQUIREMENT_FIELDS",
]
