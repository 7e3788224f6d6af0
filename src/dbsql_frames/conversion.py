"""
Type conversion utilities for JSON_ARRAY results.

JSON_ARRAY results carry every cell as a JSON scalar, almost always a string, with
no type applied. Cells are tagged once at ingestion as NULL, STRING, NUMBER or
OTHER, and each assembled column is then promoted to a numeric dtype only when
every non-null cell in it is numeric. A single non-numeric cell leaves the whole
column with its original values.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Union

import numpy
import pandas

logger = logging.getLogger(__name__)

Number = Union[int, float]

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# DOUBLE special values as the warehouse serializes them
SPECIAL_FLOATS = {
    "NaN": float("nan"),
    "Infinity": float("inf"),
    "-Infinity": float("-inf"),
}


class CellKind(Enum):
    NULL = "null"
    STRING = "string"
    NUMBER = "number"
    OTHER = "other"


@dataclass(frozen=True)
class CellValue:
    """
    A JSON cell tagged with its kind.

    ``raw`` is the value exactly as decoded from JSON. ``number`` holds the
    numeric reading of the cell, or None when it has none.
    """

    kind: CellKind
    raw: Any = None
    number: Optional[Number] = None

    @property
    def is_null(self) -> bool:
        return self.kind is CellKind.NULL

    @property
    def is_numeric(self) -> bool:
        return self.number is not None


NULL_CELL = CellValue(CellKind.NULL)


def parse_numeric(text: str) -> Optional[Number]:
    """
    Read a string as an int, falling back to a float.

    Returns None for anything that is not a plain decimal or floating point
    literal. Python's digit separators ("1_000") are not accepted, and of the
    non-finite values only the exact spellings in SPECIAL_FLOATS are.
    """

    if text in SPECIAL_FLOATS:
        return SPECIAL_FLOATS[text]
    lowered = text.lower()
    if not text.strip() or "_" in text or "nan" in lowered or "inf" in lowered:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


def to_cell(value: Any) -> CellValue:
    """Tag one decoded JSON value."""
    if value is None or value is pandas.NA:
        return NULL_CELL
    # bool is a subclass of int but JSON true/false are not numbers
    if isinstance(value, bool):
        return CellValue(CellKind.OTHER, value)
    if isinstance(value, (int, float)):
        return CellValue(CellKind.NUMBER, value, value)
    if isinstance(value, str):
        return CellValue(CellKind.STRING, value, parse_numeric(value))
    return CellValue(CellKind.OTHER, value)


def to_cells(row: Iterable[Any]) -> List[CellValue]:
    return [to_cell(value) for value in row]


def _fits_int64(number: Number) -> bool:
    return isinstance(number, int) and INT64_MIN <= number <= INT64_MAX


def promote_numeric_column(
    cells: Iterable[CellValue], name: Optional[str] = None
) -> pandas.Series:
    """
    Turn a column of tagged cells into a pandas Series.

    When every non-null cell is numeric the column becomes a nullable ``Int64``
    (all integers within int64) or ``Float64`` Series. Only null cells become
    ``pandas.NA``; a NaN cell stays NaN.
    Otherwise the column keeps the raw values in an ``object`` Series with None
    for nulls. A column without any non-null cell stays ``object``.

    Args:
        cells: Tagged cells of the column, in row order
        name: Column name given to the Series

    Returns:
        pandas.Series: The converted column
    """

    cells = list(cells)
    non_null = [cell for cell in cells if not cell.is_null]

    if non_null and all(cell.is_numeric for cell in non_null):
        dtype = (
            "Int64"
            if all(_fits_int64(cell.number) for cell in non_null)
            else "Float64"
        )
        logger.debug("Promoting column %s to %s", name, dtype)
        # explicit mask: a NaN cell is a value, only null cells are missing
        mask = numpy.array([cell.is_null for cell in cells], dtype=bool)
        if dtype == "Int64":
            values = numpy.array(
                [0 if cell.is_null else cell.number for cell in cells],
                dtype=numpy.int64,
            )
            array = pandas.arrays.IntegerArray(values, mask)
        else:
            values = numpy.array(
                [0.0 if cell.is_null else float(cell.number) for cell in cells],
                dtype=numpy.float64,
            )
            array = pandas.arrays.FloatingArray(values, mask)
        return pandas.Series(array, name=name)

    return pandas.Series(
        [None if cell.is_null else cell.raw for cell in cells],
        dtype=object,
        name=name,
    )
