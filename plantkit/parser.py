from typing import List, Dict, Any, Optional

from .adapters.csv_adapter import CsvAdapter
from .adapters.excel_adapter import ExcelAdapter
from .field_resolver import FieldResolver
from .schema import FieldSpec


class SheetReader:
    """Row source for uploaded spreadsheets.

    Only the first sheet of a workbook is read. The first row holds the
    column labels; each following non-blank row becomes a dictionary.
    """

    def __init__(self):
        """Initialize the reader with no adapters registered."""
        self.adapters = []

    def register_adapter(self, adapter):
        """Register a content adapter.

        Adapters are tried in registration order.

        Args:
            adapter: Adapter instance with can_handle(), read() and render_text()
        """
        self.adapters.append(adapter)

    def _find_adapter(self, data: bytes):
        for adapter in self.adapters:
            if adapter.can_handle(data):
                return adapter
        raise ValueError("No adapter found for uploaded content")

    def read_rows(self, data: bytes) -> List[Dict[str, Any]]:
        """Parse the first sheet into ordered row records.

        Args:
            data: Raw upload content

        Returns:
            List of dictionaries keyed by the raw column labels, in sheet order

        Raises:
            ValueError: If no adapter is found for the content
        """
        return self._find_adapter(data).read(data)

    def render_text(self, data: bytes) -> str:
        """Render the first sheet as comma-separated text, header row included.

        Raises:
            ValueError: If no adapter is found for the content
        """
        return self._find_adapter(data).render_text(data)

    def get_mapping_report(
        self,
        data: bytes,
        field_specs: Dict[str, FieldSpec],
        resolver: Optional[FieldResolver] = None
    ) -> Dict[str, Any]:
        """Get a report of how the upload's columns map to logical fields.

        Args:
            data: Raw upload content
            field_specs: Logical field -> FieldSpec (e.g. EQUIPMENT_FIELDS)
            resolver: Field resolver (default: FieldResolver())

        Returns:
            Dictionary with "mapped", "unresolved" and "unmapped" entries

        Raises:
            ValueError: If no adapter is found for the content
        """
        resolver = resolver or FieldResolver()
        return resolver.mapping_report(self.read_rows(data), field_specs)


def default_reader() -> SheetReader:
    """A SheetReader that understands .xlsx and delimited text."""
    reader = SheetReader()
    reader.register_adapter(ExcelAdapter())
    reader.register_adapter(CsvAdapter())
    return reader
