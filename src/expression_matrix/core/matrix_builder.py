"""
Stateless matrix builder for expression-matrix.

This module assembles Matrix instances from the ParsedTable records readers
produce.
"""

from typing import Iterable, List

from .matrix import ID_FIELD, Matrix
from ..readers.base import ParsedTable


class MatrixBuilder:
    """Stateless builder - turns ParsedTables into Matrices without storing state.

    This is a pure transformation utility. All inputs are explicitly passed as
    method parameters.

    Example:
        >>> builder = MatrixBuilder()
        >>> matrix = builder.build(table)
        >>> matrix.get_row_count() == len(table.row_ids)
        True
    """

    def build(self, table: ParsedTable) -> Matrix:
        """Assemble one Matrix from a ParsedTable.

        Row and column counts are declared from the id lists, so a value grid
        or annotation that disagrees with them is rejected.

        Transforms:
            ParsedTable                      Matrix
            -----------                      ------
            row_ids              ->  row metadata 'id', row vector names
            column_ids           ->  column metadata 'id', column vector names
            values               ->  value grid
            row_annotations      ->  further row metadata
            column_annotations   ->  further column metadata
            attributes           ->  matrix properties

        Raises:
            DimensionMismatchError: If values or annotations disagree with
                the id counts
        """
        row_metadata = {ID_FIELD: table.row_ids}
        row_metadata.update(
            (k, v) for k, v in table.row_annotations.items() if k != ID_FIELD
        )
        column_metadata = {ID_FIELD: table.column_ids}
        column_metadata.update(
            (k, v) for k, v in table.column_annotations.items() if k != ID_FIELD
        )

        return Matrix(
            table.values,
            len(table.row_ids),
            len(table.column_ids),
            name=table.name,
            row_metadata=row_metadata,
            column_metadata=column_metadata,
            properties=dict(table.attributes)
        )

    def build_all(self, tables: Iterable[ParsedTable]) -> List[Matrix]:
        """Assemble one Matrix per table, in order."""
        return [self.build(table) for table in tables]
