import csv
import io
import chardet
from typing import List, Dict, Any

from .excel_adapter import XLSX_MAGIC

# Legacy binary .xls (OLE2 compound document) is not text
OLE2_MAGIC = b"\xd0\xcf\x11\xe0"


class CsvAdapter:
    """CSV adapter for reading delimited text exports held in memory.

    Handles:
    - Multiple encodings (UTF-8, UTF-8-BOM, Windows-1252, ISO-8859-1, etc.)
    - Different delimiters (comma, semicolon, tab)
    - Edge cases (empty input, malformed rows)
    """

    def can_handle(self, data: bytes) -> bool:
        """Check if this adapter can handle the given bytes."""
        return not (data.startswith(XLSX_MAGIC) or data.startswith(OLE2_MAGIC))

    def _detect_encoding(self, data: bytes) -> str:
        """Detect text encoding using chardet with fallback."""
        sample = data[:10000]  # First 10KB is enough for detection

        # Check for BOM first
        if sample.startswith(b'\xef\xbb\xbf'):
            return 'utf-8-sig'

        encoding = chardet.detect(sample).get('encoding') or 'utf-8'

        # ascii is a subset; decode as utf-8 in case non-ascii appears past the sample
        encoding_lower = encoding.lower()
        if 'utf-8' in encoding_lower or 'utf8' in encoding_lower or encoding_lower == 'ascii':
            return 'utf-8'

        return encoding

    def _decode(self, data: bytes) -> str:
        encoding = self._detect_encoding(data)
        try:
            return data.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            # latin-1 maps every byte, so this cannot fail
            return data.decode('latin-1')

    def _detect_delimiter(self, text: str) -> str:
        """Detect CSV delimiter from a sample, falling back to first-line counts."""
        sample = text[:1024]
        try:
            return csv.Sniffer().sniff(sample, delimiters=',;\t').delimiter
        except csv.Error:
            pass

        first_line = sample.splitlines()[0] if sample else ''
        comma_count = first_line.count(',')
        semicolon_count = first_line.count(';')
        tab_count = first_line.count('\t')

        if tab_count > comma_count and tab_count > semicolon_count:
            return '\t'
        elif semicolon_count > comma_count:
            return ';'
        return ','

    def read(self, data: bytes) -> List[Dict[str, Any]]:
        """Read delimited text and return raw rows as list of dictionaries.

        Args:
            data: Raw file content

        Returns:
            List of dictionaries, where each dictionary represents a row
            with column names as keys. Blank rows are dropped.

        Raises:
            ValueError: If the content cannot be parsed
        """
        if not data.strip():
            return []

        text = self._decode(data)
        delimiter = self._detect_delimiter(text)

        rows = []
        try:
            reader = csv.DictReader(io.StringIO(text, newline=''), delimiter=delimiter)
            for row in reader:
                # Convert all values to strings, handling None
                cleaned_row = {
                    key: str(value) if value is not None else ''
                    for key, value in row.items()
                    if key is not None
                }
                if not any(value.strip() for value in cleaned_row.values()):
                    continue
                rows.append(cleaned_row)
        except csv.Error as e:
            raise ValueError(f"Error parsing CSV content: {e}")

        return rows

    def render_text(self, data: bytes) -> str:
        """Render the content as comma-separated text."""
        if not data.strip():
            return ''

        text = self._decode(data)
        delimiter = self._detect_delimiter(text)
        out = io.StringIO()
        writer = csv.writer(out, lineterminator='\n')
        try:
            for row in csv.reader(io.StringIO(text, newline=''), delimiter=delimiter):
                writer.writerow(row)
        except csv.Error as e:
            raise ValueError(f"Error parsing CSV content: {e}")
        return out.getvalue()
