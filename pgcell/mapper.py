"""Row mapping: sequences of raw cells into TableRows."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence

from .decoder import ValueDecoder
from .exceptions import RowShapeError
from .types import RawCell, TableRow

logger = logging.getLogger(__name__)


class ResultMapper:
    """Decodes whole rows with a shared ValueDecoder.

    Example:
        mapper = ResultMapper()
        rows = mapper.map_rows(rows_from_pgresult(cursor.pgresult))
        rows[0].name
    """

    def __init__(self, decoder: Optional[ValueDecoder] = None):
        self.decoder = decoder or ValueDecoder()

    def map_row(self, cells: Iterable[RawCell]) -> TableRow:
        """Decode every cell of one row.

        Args:
            cells: Cells in column order.

        Returns:
            TableRow keyed by column name, in column order.

        Raises:
            RowShapeError: If two cells share a column name.
        """
        row = TableRow()
        for cell in cells:
            if cell.column_name in row:
                raise RowShapeError(
                    f"Duplicate column name in row: {cell.column_name!r}",
                    detail="Alias duplicate columns in the query",
                )
            row[cell.column_name] = self.decoder.decode(cell)
        return row

    def map_rows(self, rows: Iterable[Sequence[RawCell]]) -> List[TableRow]:
        """Decode rows one after another."""
        table_rows = [self.map_row(cells) for cells in rows]
        logger.info(f"Mapped {len(table_rows)} rows")
        return table_rows

    def map_rows_concurrently(
        self,
        rows: Iterable[Sequence[RawCell]],
        max_workers: Optional[int] = None,
    ) -> List[TableRow]:
        """Decode rows on a thread pool.

        Decoding holds no shared mutable state, so rows are handed out
        without locking. Output order matches input order.

        Args:
            rows: Rows of cells.
            max_workers: Thread count (None = executor default).

        Returns:
            List of TableRow objects.

        Raises:
            RowShapeError: If any row has duplicate column names.
        """
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="pgcell") as pool:
            table_rows = list(pool.map(self.map_row, rows))
        logger.info(f"Mapped {len(table_rows)} rows concurrently")
        return table_rows
