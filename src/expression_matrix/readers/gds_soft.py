"""
GDS SOFT reader for expression-matrix.

Parses curated GEO DataSet files (GDSxxx.soft.gz):

    ^DATASET = GDS507
    !dataset_title = Renal clear cell carcinoma
    !dataset_platform = GPL97
    ^SUBSET = GDS507_1
    !subset_description = normal
    !subset_sample_id = GSM11810,GSM11827
    !subset_type = disease state
    !dataset_table_begin
    ID_REF	IDENTIFIER	GSM11810	GSM11827
    200000_s_at	PRPF8	4254	3510
    !dataset_table_end
"""

import logging
from typing import Dict, List

from .base import BaseReader, ParsedTable
from ..core.exceptions import ParseError

logger = logging.getLogger(__name__)

TABLE_BEGIN = '!dataset_table_begin'
TABLE_END = '!dataset_table_end'
IDENTIFIER_COLUMN = 'IDENTIFIER'


class GdsSoftReader(BaseReader):
    """Reader for GEO DataSet SOFT text.

    Produces one ParsedTable:
    - rows: probes, with the IDENTIFIER column as row annotation 'symbol'
    - columns: samples, with one annotation per subset type
      (e.g. 'disease state' -> 'normal' / 'tumor')
    - !dataset_ fields become attributes
    """

    suffixes = ('.gz', '.soft')

    def read(self, payload: bytes, name: str) -> List[ParsedTable]:
        text = self.decode(payload, name)

        attributes: Dict[str, str] = {}
        subsets: List[Dict[str, str]] = []
        table_lines: List[str] = []
        entity = None
        in_table = False
        table_closed = False

        for line in text.splitlines():
            if in_table:
                if line.startswith(TABLE_END):
                    in_table = False
                    table_closed = True
                    break
                if line.strip():
                    table_lines.append(line)
                continue

            if line.startswith(TABLE_BEGIN):
                in_table = True
            elif line.startswith('^'):
                entity = line[1:].partition('=')[0].strip().upper()
                if entity == 'SUBSET':
                    subsets.append({})
            elif line.startswith('!'):
                key, _, value = line[1:].partition('=')
                key, value = key.strip(), value.strip()
                if entity == 'DATASET' and key.startswith('dataset_'):
                    attributes[key[len('dataset_'):]] = value
                elif entity == 'SUBSET' and key.startswith('subset_'):
                    subsets[-1][key[len('subset_'):]] = value

        if not table_closed:
            marker = TABLE_END if table_lines or in_table else TABLE_BEGIN
            raise ParseError(f"Missing {marker} in {name}")

        frame = self.read_table(table_lines, name)

        row_annotations: Dict[str, List[str]] = {}
        if IDENTIFIER_COLUMN in frame.columns:
            row_annotations['symbol'] = list(frame[IDENTIFIER_COLUMN])
            frame = frame.drop(columns=[IDENTIFIER_COLUMN])

        column_ids = [str(c) for c in frame.columns]
        table = ParsedTable(
            name=self.dataset_name(name),
            row_ids=list(frame.index),
            column_ids=column_ids,
            values=self.numeric_grid(frame),
            row_annotations=row_annotations,
            column_annotations=self._subset_annotations(subsets, column_ids),
            attributes=attributes
        )
        logger.debug(f"Parsed {name}: {table.values.shape[0]} rows x {table.values.shape[1]} columns")
        return [table]

    @staticmethod
    def _subset_annotations(subsets: List[Dict[str, str]],
                            column_ids: List[str]) -> Dict[str, List[str]]:
        """Map each subset type to a per-sample description list."""
        positions = {sample: j for j, sample in enumerate(column_ids)}
        annotations: Dict[str, List[str]] = {}

        for subset in subsets:
            subset_type = subset.get('type')
            if not subset_type:
                continue
            column = annotations.setdefault(subset_type, [''] * len(column_ids))
            for sample in subset.get('sample_id', '').split(','):
                j = positions.get(sample.strip())
                if j is not None:
                    column[j] = subset.get('description', '')

        return annotations
