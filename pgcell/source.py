"""Row source adapters.

Turns psycopg results into RawCells, leaving values as the raw bytes the
server sent so the decoder sees exactly what went over the wire.

Example:
    from pgcell.source import fetch_cells
    from pgcell import ResultMapper

    rows = ResultMapper().map_rows(fetch_cells(dsn, "SELECT * FROM hosts"))
"""

import logging
from typing import Any, Iterator, List

from .exceptions import SourceError
from .types import RawCell

logger = logging.getLogger(__name__)


def column_names(pgresult: Any) -> List[str]:
    """Column names of a result, ``col_<n>`` where the server sent none."""
    names = []
    for col_idx in range(pgresult.nfields):
        name = pgresult.fname(col_idx)
        if name:
            names.append(name.decode("utf-8") if isinstance(name, bytes) else name)
        else:
            names.append(f"col_{col_idx}")
    return names


def rows_from_pgresult(pgresult: Any) -> Iterator[List[RawCell]]:
    """Yield one list of RawCells per row of a psycopg ``PGresult``.

    Any object with ``ntuples``, ``nfields``, ``fname(i)``, ``ftype(i)`` and
    ``get_value(row, col)`` works; ``get_value`` returns None for NULL.

    Args:
        pgresult: Result object (e.g. ``cursor.pgresult``).

    Yields:
        Cells in column order.
    """
    names = column_names(pgresult)
    type_ids = [pgresult.ftype(col_idx) for col_idx in range(pgresult.nfields)]

    for row_idx in range(pgresult.ntuples):
        cells = []
        for col_idx, name in enumerate(names):
            value = pgresult.get_value(row_idx, col_idx)
            cells.append(
                RawCell(
                    data=None if value is None else bytes(value),
                    column_name=name,
                    type_id=type_ids[col_idx],
                )
            )
        yield cells


def fetch_cells(dsn: str, sql: str, binary: bool = True) -> List[List[RawCell]]:
    """Run one statement and return its rows as raw cells.

    Requires the ``pg`` extra (psycopg 3).

    Args:
        dsn: PostgreSQL connection string.
        sql: Statement to execute.
        binary: Ask the server for binary-format results.

    Returns:
        Rows of cells; empty for statements without a result set.

    Raises:
        SourceError: If psycopg is missing, or connecting or executing fails.
    """
    try:
        import psycopg
    except ImportError as e:
        raise SourceError("psycopg is required: pip install 'pgcell[pg]'") from e

    try:
        with psycopg.connect(dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, binary=binary)
                pgresult = cur.pgresult
                if pgresult is None or pgresult.nfields == 0:
                    return []
                rows = list(rows_from_pgresult(pgresult))
    except psycopg.Error as e:
        raise SourceError(f"Query failed: {e}", detail=sql) from e

    logger.info(f"Fetched {len(rows)} rows")
    return rows
