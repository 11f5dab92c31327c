import csv
import io
import openpyxl

XLSX_MAGIC = b"PK\x03\x04"


class ExcelAdapter:
    """Reads the first worksheet of an .xlsx workbook held in memory."""

    def can_handle(self, data):
        return data[:4] == XLSX_MAGIC

    def _sheet_values(self, data):
        wb = openpyxl.load_workbook(io.BytesIO(data), data_only=True, read_only=True)
        try:
            # First sheet in document order, not whichever tab was left active
            ws = wb.worksheets[0]
            return [tuple(row) for row in ws.iter_rows(values_only=True)]
        finally:
            wb.close()

    def read(self, data):
        values = self._sheet_values(data)
        if not values:
            return []

        headers = values[0]
        rows = []
        for row in values[1:]:
            if all(cell is None for cell in row):
                continue
            rows.append({
                header: cell
                for header, cell in zip(headers, row)
                if header is not None
            })

        return rows

    def render_text(self, data):
        out = io.StringIO()
        writer = csv.writer(out, lineterminator="\n")
        for row in self._sheet_values(data):
            writer.writerow([_cell_text(cell) for cell in row])
        return out.getvalue()


def _cell_text(cell):
    if cell is None:
        return ""
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell)
