"""Parsers for Earth Orientation Parameter data files.

Three text layouts are supported, all producing a Polars DataFrame with
the raw columns of :data:`~tidejax.eop._types.EOP_COLUMNS` (arcseconds and
seconds, not yet converted):

- ``"standard"``: IERS standard / Bulletin A format
  (``finals.all.iau2000.txt``), fixed columns.
- ``"c04"``: IERS EOP 14 C04 series (``EOP_14C04_IAU2000``), whitespace
  separated ``year month day MJD x y UT1-UTC LOD dX dY ...``.
- ``"columns"``: plain whitespace table ``MJD x y UT1-UTC LOD dX dY`` with
  ``#`` comments.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

import polars as pl

from tidejax.eop._types import EOP_COLUMNS

logger = logging.getLogger(__name__)

# Column ranges for IERS standard format (0-indexed Python slices)
_MJD_RANGE = slice(6, 15)
_FLAG_INDEX = 16
_PM_X_RANGE = slice(17, 27)
_PM_Y_RANGE = slice(36, 46)
_UT1_UTC_RANGE = slice(58, 68)
_LOD_RANGE = slice(78, 86)
_DX_RANGE = slice(96, 106)
_DY_RANGE = slice(115, 125)
_STANDARD_LINE_LENGTH = 187

EOP_FORMATS: tuple[str, ...] = ("auto", "standard", "c04", "columns")
"""Accepted values of the ``fmt`` argument of :func:`load_eop_table`."""

_Row = tuple[float, float, float, float, float, float, float]


def parse_standard_line(line: str) -> _Row | None:
    """Parse a single line from an IERS standard format EOP file.

    Lines shorter than 187 characters are padded with spaces (prediction
    lines may have trailing whitespace trimmed). Lines longer than 187
    characters or lines where required fields (MJD, PM_X, PM_Y, UT1-UTC)
    cannot be parsed are skipped (returns None).

    Args:
        line: A single line from the IERS standard format file.

    Returns:
        Tuple of (mjd, pm_x [as], pm_y [as], ut1_utc [s],
        lod [s] or NaN, dX [as] or NaN, dY [as] or NaN),
        or None if the line cannot be parsed.
    """
    if len(line) > _STANDARD_LINE_LENGTH:
        return None

    line = line.ljust(_STANDARD_LINE_LENGTH)

    try:
        mjd = float(line[_MJD_RANGE].strip())
        pm_x = float(line[_PM_X_RANGE].strip())
        pm_y = float(line[_PM_Y_RANGE].strip())
        ut1_utc = float(line[_UT1_UTC_RANGE].strip())
    except ValueError:
        return None

    # Optional fields (NaN if missing)
    try:
        lod = float(line[_LOD_RANGE].strip()) * 1.0e-3  # ms -> s
    except ValueError:
        lod = math.nan

    try:
        dX = float(line[_DX_RANGE].strip()) * 1.0e-3  # mas -> as
    except ValueError:
        dX = math.nan

    try:
        dY = float(line[_DY_RANGE].strip()) * 1.0e-3  # mas -> as
    except ValueError:
        dY = math.nan

    return mjd, pm_x, pm_y, ut1_utc, lod, dX, dY


def parse_c04_line(line: str) -> _Row | None:
    """Parse a single data line of the IERS EOP 14 C04 series.

    Header and comment lines are skipped (returns None).

    Args:
        line: A single line from the C04 file.

    Returns:
        Tuple of (mjd, pm_x [as], pm_y [as], ut1_utc [s], lod [s],
        dX [as], dY [as]), or None if the line is not a data line.
    """
    parts = line.split()
    if len(parts) < 10:
        return None
    try:
        year = int(parts[0])
        int(parts[1])
        int(parts[2])
        values = [float(p) for p in parts[3:10]]
    except ValueError:
        return None
    if year < 1900:
        return None
    mjd, pm_x, pm_y, ut1_utc, lod, dX, dY = values
    return mjd, pm_x, pm_y, ut1_utc, lod, dX, dY


def parse_columns_line(line: str) -> _Row | None:
    """Parse a line of a plain ``MJD x y UT1-UTC LOD dX dY`` table.

    Args:
        line: A single line; text after ``#`` is ignored.

    Returns:
        Tuple of 7 floats in :data:`EOP_COLUMNS` order, or None for blank
        and comment lines.

    Raises:
        ValueError: If a data line does not hold 7 numeric values.
    """
    line = line.split("#", 1)[0].strip()
    if not line:
        return None
    parts = line.split()
    if len(parts) != len(EOP_COLUMNS):
        raise ValueError(
            f"Expected {len(EOP_COLUMNS)} columns (mjd xp yp UT1-UTC LOD dX dY), "
            f"got {len(parts)}: {line!r}"
        )
    mjd, pm_x, pm_y, ut1_utc, lod, dX, dY = (float(p) for p in parts)
    return mjd, pm_x, pm_y, ut1_utc, lod, dX, dY


def _detect_format(lines: list[str]) -> str:
    """Guess the EOP file layout from its lines."""
    for line in lines:
        stripped = line.split("#", 1)[0].strip()
        if not stripped:
            continue
        if len(line) > _FLAG_INDEX and line[_FLAG_INDEX] in "IP" and parse_standard_line(line) is not None:
            return "standard"
        if parse_c04_line(line) is not None:
            return "c04"
        parts = stripped.split()
        if len(parts) == len(EOP_COLUMNS):
            try:
                [float(p) for p in parts]
            except ValueError:
                continue
            return "columns"
    raise ValueError("Unable to detect EOP file format")


def _rows_to_dataframe(rows: list[_Row]) -> pl.DataFrame:
    """Assemble parsed rows into a raw EOP DataFrame."""
    columns = list(zip(*rows)) if rows else [() for _ in EOP_COLUMNS]
    return pl.DataFrame(
        {name: pl.Series(list(col), dtype=pl.Float64) for name, col in zip(EOP_COLUMNS, columns)}
    )


def parse_eop_lines(lines: list[str], fmt: str = "auto") -> pl.DataFrame:
    """Parse EOP text lines into a raw EOP DataFrame.

    Missing optional values of the standard format (LOD, dX, dY in the
    prediction part) are set to zero.

    Args:
        lines: Lines of an EOP file.
        fmt: One of :data:`EOP_FORMATS`.

    Returns:
        DataFrame with the columns of :data:`EOP_COLUMNS`.

    Raises:
        ValueError: If *fmt* is unknown or no valid lines were parsed.
    """
    if fmt not in EOP_FORMATS:
        raise ValueError(f"Unknown EOP format {fmt!r}. Must be one of {EOP_FORMATS}")
    if fmt == "auto":
        fmt = _detect_format(lines)

    parser = {
        "standard": parse_standard_line,
        "c04": parse_c04_line,
        "columns": parse_columns_line,
    }[fmt]

    rows = []
    for line in lines:
        row = parser(line.rstrip("\n"))
        if row is not None:
            rows.append(row)

    if not rows:
        raise ValueError(f"No valid EOP data found ({fmt} format)")

    df = _rows_to_dataframe(rows)
    missing = df.select(pl.col(["lod", "dX", "dY"]).is_nan().sum()).sum_horizontal().item()
    if missing:
        logger.debug("Setting %d missing LOD/dX/dY values to zero", missing)
        df = df.with_columns(pl.col(["lod", "dX", "dY"]).fill_nan(0.0))
    return df


def load_eop_table(filepath: str | Path, fmt: str = "auto") -> pl.DataFrame:
    """Read an EOP file into a raw EOP DataFrame.

    Args:
        filepath: Path to the EOP file.
        fmt: One of :data:`EOP_FORMATS`.  ``"auto"`` inspects the content.

    Returns:
        DataFrame with the columns of :data:`EOP_COLUMNS`.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If no valid EOP data is found.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"EOP file not found: {filepath}")
    with open(filepath) as f:
        lines = f.readlines()
    return parse_eop_lines(lines, fmt)


def parse_standard_file(filepath: str | Path) -> pl.DataFrame:
    """Read an IERS standard format file (``finals.all.iau2000.txt``).

    Args:
        filepath: Path to the file.

    Returns:
        DataFrame with the columns of :data:`EOP_COLUMNS`.
    """
    return load_eop_table(filepath, "standard")


def parse_c04_file(filepath: str | Path) -> pl.DataFrame:
    """Read an IERS EOP 14 C04 file.

    Args:
        filepath: Path to the file.

    Returns:
        DataFrame with the columns of :data:`EOP_COLUMNS`.
    """
    return load_eop_table(filepath, "c04")
