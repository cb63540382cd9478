"""
Matrix Loader - Reads workbook sheets into plain 2-D grids
Row/column indexes are zero-based from A1, so fixed layout offsets (name row,
label column) hold even when the leading columns of a sheet are blank.
"""

from io import BytesIO
from typing import Any, List

from openpyxl import load_workbook
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet


SheetMatrix = List[List[Any]]


def load_workbook_bytes(data: bytes) -> Workbook:
    """Open an in-memory .xlsx buffer. Formula cells yield their cached values."""
    return load_workbook(BytesIO(data), data_only=True)


def sheet_to_matrix(ws: Worksheet) -> SheetMatrix:
    """
    Convert a worksheet into a dense grid of raw cell values.

    Covers A1 through the last used row/column; absent cells are None. A
    sheet with no cells yields a 1x1 grid of None.
    """
    max_row = ws.max_row or 1
    max_col = ws.max_column or 1

    matrix: SheetMatrix = []
    for row in ws.iter_rows(min_row=1, max_row=max_row,
                            min_col=1, max_col=max_col, values_only=True):
        matrix.append(list(row))

    return matrix or [[None]]
