from typing import List, Dict, Any, Optional
import math
import re
from .schema import FieldSpec, NUMERIC
from .unit_normalizer import UnitNormalizer


class FieldResolver:
    """Resolver for extracting canonical fields from inconsistently labeled rows.

    Each logical field declares an ordered alias list. The first alias present
    in the row with a usable value supplies the field. Nothing is inferred:
    alias order is fixed configuration per ingestion path.
    """

    # Substituted for numeric fields that are absent or not a number
    NUMERIC_FALLBACK = 0.0

    def __init__(self, unit_normalizer: Optional[UnitNormalizer] = None):
        """Initialize the resolver.

        Args:
            unit_normalizer: Numeric coercion helper (default: UnitNormalizer())
        """
        self.unit_normalizer = unit_normalizer or UnitNormalizer()

    @staticmethod
    def normalize_label(label: Any) -> str:
        """Fold a raw column label for tolerant comparison.

        Lowercases, strips and collapses runs of whitespace, underscores and
        hyphens to a single space, so "Steam_Load" and "STEAM LOAD" compare
        equal.
        """
        return re.sub(r'[\s_\-]+', ' ', str(label).lower().strip())

    @staticmethod
    def is_missing(value: Any) -> bool:
        """True for None, blank text and NaN. Zero is a value, not missing."""
        if value is None:
            return True
        if isinstance(value, str):
            return not value.strip()
        if isinstance(value, float):
            return math.isnan(value)
        return False

    def find_label(self, row: Dict[str, Any], aliases: List[str]) -> Optional[str]:
        """Find the raw label supplying a field.

        For each alias in order, an exact label wins over a folded match.

        Args:
            row: Raw row (label -> value)
            aliases: Ordered acceptable labels for one logical field

        Returns:
            The raw label whose value should be used, or None if no alias
            is present with a non-missing value
        """
        folded = {}
        for label in row.keys():
            if label is None:
                continue
            folded.setdefault(self.normalize_label(label), []).append(label)

        for alias in aliases:
            if alias in row and not self.is_missing(row[alias]):
                return alias
            for label in folded.get(self.normalize_label(alias), []):
                if not self.is_missing(row[label]):
                    return label

        return None

    @staticmethod
    def _text_value(value: Any) -> str:
        # Spreadsheet tags like 101 come back from openpyxl as 101 or 101.0
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value).strip()

    def resolve_present(
        self,
        row: Dict[str, Any],
        field_specs: Dict[str, FieldSpec]
    ) -> Dict[str, Any]:
        """Resolve every logical field, keeping absent values as None.

        Numeric fields that are absent or cannot be coerced resolve to None,
        so callers can tell "unknown" from an explicit zero.

        Args:
            row: Raw row (label -> value)
            field_specs: Logical field -> FieldSpec

        Returns:
            Dictionary with one entry per logical field
        """
        resolved = {}

        for logical_field, spec in field_specs.items():
            label = self.find_label(row, spec.aliases)
            if label is None:
                resolved[logical_field] = None
                continue

            value = row[label]
            if spec.kind == NUMERIC:
                resolved[logical_field] = self.unit_normalizer.coerce(value, spec.unit)
            else:
                resolved[logical_field] = self._text_value(value)

        return resolved

    def resolve(
        self,
        row: Dict[str, Any],
        field_specs: Dict[str, FieldSpec]
    ) -> Dict[str, Any]:
        """Resolve every logical field, applying the numeric fallback.

        Absent text fields are None. Absent or uncoercible numeric fields
        are 0.0. Never raises.

        Args:
            row: Raw row (label -> value)
            field_specs: Logical field -> FieldSpec

        Returns:
            Dictionary with one entry per logical field
        """
        resolved = self.resolve_present(row, field_specs)
        for logical_field, spec in field_specs.items():
            if spec.kind == NUMERIC and resolved[logical_field] is None:
                resolved[logical_field] = self.NUMERIC_FALLBACK
        return resolved

    def mapping_report(
        self,
        rows: List[Dict[str, Any]],
        field_specs: Dict[str, FieldSpec]
    ) -> Dict[str, Any]:
        """Generate a report of which raw labels fed which logical field.

        Args:
            rows: Raw rows from one sheet
            field_specs: Logical field -> FieldSpec

        Returns:
            Dictionary with "mapped" (logical field -> raw labels used, in
            first-seen order), "unresolved" (logical fields no row supplied)
            and "unmapped" (raw labels no field could use)
        """
        mapped: Dict[str, List[str]] = {name: [] for name in field_specs}

        for row in rows:
            for logical_field, spec in field_specs.items():
                label = self.find_label(row, spec.aliases)
                if label is not None and label not in mapped[logical_field]:
                    mapped[logical_field].append(label)

        known = {
            self.normalize_label(alias)
            for spec in field_specs.values()
            for alias in spec.aliases
        }
        unmapped = []
        for row in rows:
            for label in row.keys():
                if label is None or label in unmapped:
                    continue
                if self.normalize_label(label) not in known:
                    unmapped.append(label)

        return {
            "mapped": {name: labels for name, labels in mapped.items() if labels},
            "unresolved": [name for name, labels in mapped.items() if not labels],
            "unmapped": unmapped,
        }
