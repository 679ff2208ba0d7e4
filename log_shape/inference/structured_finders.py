import re
import logging

from .base_finder import BaseStructureFinder
from .delimited_reader import (
    DelimitedRecordReader,
    CSV_PRESET,
    TSV_PRESET,
    SEMICOLON_PRESET,
    PIPE_PRESET,
)
from .header_detector import HeaderDetector
from .log_core import LogFormat, StructureResult
from .utils import SchemaManager

logger = logging.getLogger(__name__)


class DelimitedStructureFinder(BaseStructureFinder):
    """
    Structure of character delimited samples: header, column types and
    timestamp column.
    """

    def __init__(self, preset=CSV_PRESET, format_type=LogFormat.CSV, header_detector=None):
        super().__init__()
        self.preset = preset
        self.format_type = format_type
        self.reader = DelimitedRecordReader(preset)
        self.header_detector = header_detector or HeaderDetector()

    def can_create_from_sample(self, sample, explanation=None) -> bool:
        return self.reader.can_parse(sample, explanation)

    def create_from_sample(self, sample, explanation=None) -> StructureResult:
        explanation = [] if explanation is None else explanation

        rows, truncated = self.reader.read_rows(sample)
        if len(rows) > 1 and len(rows[-1]) != len(rows[0]):
            self.explain(explanation, "Dropping short last row as truncated")
            rows = rows[:-1]
            truncated = True

        header = self.header_detector.find_header(rows, explanation)
        columns = self._unique_column_names(header.column_names)
        data_rows = rows[1:] if header.is_header_present else rows
        records = [dict(zip(columns, row)) for row in data_rows]

        timestamp = SchemaManager.guess_timestamp_field(records, explanation)
        timestamp_field = None
        multiline_start_pattern = None
        if timestamp is not None:
            field_name, timestamp_match = timestamp
            timestamp_field = self.build_timestamp_field(field_name, timestamp_match)
            multiline_start_pattern = self.make_multiline_start_pattern(
                columns.index(field_name), timestamp_match.simple_pattern.pattern
            )
            self.explain(
                explanation,
                f"Timestamp field is [{field_name}] in format [{timestamp_match.format_id}]",
            )
        else:
            self.explain(explanation, "No timestamp field found")

        schema = SchemaManager.guess_mappings(records, columns, explanation)

        result = StructureResult(
            format_type=self.format_type,
            schema=schema,
            timestamp_field=timestamp_field,
            header_present=header.is_header_present,
            column_names=list(columns),
            delimiter=self.preset.delimiter,
            multiline_start_pattern=multiline_start_pattern,
            metadata={
                "explanation": explanation,
                "rows_processed": len(data_rows),
                "truncated": truncated,
            },
        )
        for row in data_rows:
            result.add_sample_message(self.preset.delimiter.join(row))
        return result

    def make_multiline_start_pattern(self, column_index, simple_pattern):
        """
        Regex matching the start of a record: a lazy wildcard and delimiter
        for each column before the timestamp column, then the timestamp.
        """
        if self.preset.delimiter == "\t":
            delimiter = r"\t"
        else:
            delimiter = re.escape(self.preset.delimiter)
        return "^" + (".*?" + delimiter) * column_index + simple_pattern

    @staticmethod
    def _unique_column_names(names):
        columns = []
        counts = {}
        for position, name in enumerate(names, 1):
            name = name or f"column{position}"
            counts[name] = counts.get(name, 0) + 1
            columns.append(name if counts[name] == 1 else f"{name}{counts[name]}")
        return columns


def csv_finder():
    return DelimitedStructureFinder(CSV_PRESET, LogFormat.CSV)


def tsv_finder():
    return DelimitedStructureFinder(TSV_PRESET, LogFormat.TSV)


def semicolon_finder():
    return DelimitedStructureFinder(SEMICOLON_PRESET, LogFormat.SEMI_COLON_SEPARATED)


def pipe_finder():
    return DelimitedStructureFinder(PIPE_PRESET, LogFormat.PIPE_SEPARATED)
