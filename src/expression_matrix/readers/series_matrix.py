"""
Series matrix reader for expression-matrix.

Parses GEO series matrix files (GSExxx_series_matrix.txt.gz). The layout is:

    !Series_title	"..."
    !Series_platform_id	"GPL1261"
    !Sample_title	"liver 1"	"liver 2"
    !Sample_geo_accession	"GSM1"	"GSM2"
    !Sample_characteristics_ch1	"tissue: liver"	"tissue: liver"
    !series_matrix_table_begin
    "ID_REF"	"GSM1"	"GSM2"
    "1415670_at"	7.1	6.9
    !series_matrix_table_end
"""

import logging
from typing import Dict, List, Tuple

from .base import BaseReader, ParsedTable
from ..core.exceptions import ParseError

logger = logging.getLogger(__name__)

TABLE_BEGIN = '!series_matrix_table_begin'
TABLE_END = '!series_matrix_table_end'
SERIES_PREFIX = '!Series_'
SAMPLE_PREFIX = '!Sample_'
CHARACTERISTICS_PREFIX = 'characteristics_'


def _split(line: str) -> List[str]:
    """Split one tab-separated header line and unquote each field.

    Header values can be arbitrarily long (e.g. !Sample_data_processing), so
    no field size limit applies.
    """
    return [_unquote(field) for field in line.rstrip('\r\n').split('\t')]


def _unquote(field: str) -> str:
    if len(field) >= 2 and field[0] == '"' and field[-1] == '"':
        return field[1:-1]
    return field


class SeriesMatrixReader(BaseReader):
    """Reader for GEO series matrix text.

    Produces one ParsedTable per file:
    - rows: probes (ID_REF column), no row annotations
    - columns: samples, annotated with every !Sample_ field
    - characteristics of the form 'key: value' become one annotation per key
    - !Series_ fields become attributes (repeated keys joined with '; ')

    Example:
        >>> reader = SeriesMatrixReader()
        >>> tables = reader.read(payload, 'GSE53986_series_matrix.txt.gz')
        >>> tables[0].values.shape
        (45101, 16)
    """

    suffixes = ('.gz', '.txt', '_series_matrix')

    def read(self, payload: bytes, name: str) -> List[ParsedTable]:
        text = self.decode(payload, name)

        attributes: Dict[str, str] = {}
        sample_lines: List[Tuple[str, List[str]]] = []
        table_lines: List[str] = []
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
            elif line.startswith(TABLE_BEGIN):
                in_table = True
            elif line.startswith(SERIES_PREFIX):
                fields = _split(line)
                key = fields[0][len(SERIES_PREFIX):]
                value = '\t'.join(fields[1:])
                attributes[key] = f"{attributes[key]}; {value}" if key in attributes else value
            elif line.startswith(SAMPLE_PREFIX):
                fields = _split(line)
                sample_lines.append((fields[0][len(SAMPLE_PREFIX):], fields[1:]))

        if not table_closed:
            marker = TABLE_END if table_lines or in_table else TABLE_BEGIN
            raise ParseError(f"Missing {marker} in {name}")

        frame = self.read_table(table_lines, name)
        column_ids = [str(c) for c in frame.columns]
        column_annotations = self._sample_annotations(sample_lines, len(column_ids), name)

        table = ParsedTable(
            name=self.dataset_name(name),
            row_ids=list(frame.index),
            column_ids=column_ids,
            values=self.numeric_grid(frame),
            column_annotations=column_annotations,
            attributes=attributes
        )
        logger.debug(f"Parsed {name}: {table.values.shape[0]} rows x {table.values.shape[1]} columns")
        return [table]

    def _sample_annotations(self, sample_lines: List[Tuple[str, List[str]]],
                            count: int, name: str) -> Dict[str, List[str]]:
        """Turn !Sample_ lines into per-sample annotation lists."""
        annotations: Dict[str, List[str]] = {}

        for key, values in sample_lines:
            if len(values) != count:
                raise ParseError(
                    f"!Sample_{key} in {name} has {len(values)} values for {count} samples"
                )

            for j, value in enumerate(values):
                value = value.strip()
                if not value:
                    continue
                field = key
                if key.startswith(CHARACTERISTICS_PREFIX) and ':' in value:
                    field, _, value = value.partition(':')
                    field, value = field.strip(), value.strip()

                column = annotations.setdefault(field, [''] * count)
                column[j] = f"{column[j]}; {value}" if column[j] else value

        return annotations
