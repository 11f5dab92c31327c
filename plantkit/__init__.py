from .parser import SheetReader, default_reader
from .field_resolver import FieldResolver
from .unit_normalizer import UnitNormalizer
from .schema import FieldSpec, EQUIPMENT_FIELDS, UTILITY_REQUIREMENT_FIELDS

__all__ = ["SheetReader", "default_reader", "FieldResolver", "UnitNormalizer", "FieldSpec", "EQUIPMENT_FIELDS", "UTILITY_REQUIREMENT_FIELDS"]
