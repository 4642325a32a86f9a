"""Earth Orientation Parameter (EOP) series.

Loaders read IERS files into Polars tables; :func:`eop_from_table`
validates a table and converts it into the immutable :class:`EOPData`
series consumed by the Earth rotation models.

Typical usage::

    from tidejax.eop import load_eop_from_file
    eop = load_eop_from_file("EOP_14C04_IAU2000.txt")
"""

from tidejax.eop._download import (
    IERS_C04_URL,
    IERS_STANDARD_URL,
    download_c04_eop_file,
    download_standard_eop_file,
)
from tidejax.eop._parsers import (
    EOP_FORMATS,
    load_eop_table,
    parse_c04_file,
    parse_c04_line,
    parse_columns_line,
    parse_eop_lines,
    parse_standard_file,
    parse_standard_line,
)
from tidejax.eop._providers import (
    eop_from_table,
    load_cached_eop,
    load_default_eop,
    load_eop_from_file,
    static_eop,
)
from tidejax.eop._types import EOP_COLUMNS, EOPData

__all__ = [
    "EOPData",
    "EOP_COLUMNS",
    "EOP_FORMATS",
    "IERS_C04_URL",
    "IERS_STANDARD_URL",
    "download_c04_eop_file",
    "download_standard_eop_file",
    "eop_from_table",
    "load_cached_eop",
    "load_default_eop",
    "load_eop_from_file",
    "load_eop_table",
    "parse_c04_file",
    "parse_c04_line",
    "parse_columns_line",
    "parse_eop_lines",
    "parse_standard_file",
    "parse_standard_line",
    "static_eop",
]
