import csv
import logging
from dataclasses import dataclass
from io import StringIO

from .errors import MalformedInputError

logger = logging.getLogger(__name__)

# What the csv module reports when the sample ends inside a quoted field
TRUNCATION_MESSAGE = "unexpected end of data"


@dataclass(frozen=True)
class DelimitedPreset:

    name: str
    delimiter: str
    quote_char: str = '"'
    line_terminator: str = "\r\n"


CSV_PRESET = DelimitedPreset("csv", ",")
TSV_PRESET = DelimitedPreset("tsv", "\t")
SEMICOLON_PRESET = DelimitedPreset("semicolon", ";")
PIPE_PRESET = DelimitedPreset("pipe", "|")


class DelimitedRecordReader:
    """
    Reads rows of a delimited sample, tolerating a final record that was cut
    off part way through a quoted field.
    """

    def __init__(self, preset=CSV_PRESET):
        self.preset = preset

    def _reader(self, sample):
        return csv.reader(
            StringIO(sample, newline=""),
            delimiter=self.preset.delimiter,
            quotechar=self.preset.quote_char,
            doublequote=True,
            strict=True,
        )

    def read_rows(self, sample):
        """
        Parse sample into rows, skipping blank lines.

        Returns:
            Tuple of (rows, truncated) where truncated says whether an
            incomplete final record was discarded

        Raises:
            MalformedInputError: on any parse error other than truncation, or
            if truncation leaves no complete row
        """
        rows = []
        reader = self._reader(sample)
        try:
            for row in reader:
                if row:
                    rows.append(row)
        except csv.Error as e:
            if TRUNCATION_MESSAGE not in str(e):
                raise MalformedInputError(
                    f"Malformed {self.preset.name} on line {reader.line_num}: {e}"
                ) from e
            if not rows:
                raise MalformedInputError(
                    f"{self.preset.name} sample ends before its first record is complete"
                ) from e
            logger.debug(
                f"Discarding truncated {self.preset.name} record at line {reader.line_num}"
            )
            return rows, True

        return rows, False

    def can_parse(self, sample, explanation=None) -> bool:
        """
        Cheap check for whether sample looks like this delimited format.

        Every row but the last must have the same number of fields as the
        first, and there must be at least two fields per row and at least two
        complete rows.  A last row with fewer fields is taken to be truncated
        and not counted.
        """
        explanation = [] if explanation is None else explanation
        name = self.preset.name

        try:
            rows, truncated = self.read_rows(sample)
        except MalformedInputError as e:
            self._explain(explanation, f"Not {name} because of parse error: {e}")
            return False

        if not rows:
            self._explain(explanation, f"Not {name} because the sample has no rows")
            return False

        field_count = len(rows[0])
        if field_count < 2:
            self._explain(
                explanation,
                f"Not {name} because the first row has fewer than 2 fields: [{field_count}]",
            )
            return False

        complete_rows = 0
        last_index = len(rows) - 1
        for index, row in enumerate(rows):
            if len(row) == field_count:
                complete_rows += 1
                continue
            if index == last_index and len(row) < field_count:
                logger.debug(f"Treating short last row of {name} sample as truncated")
                continue
            self._explain(
                explanation,
                f"Not {name} because row [{index + 1}] has a different number of "
                f"fields to the first row: [{len(row)}] vs [{field_count}]",
            )
            return False

        if complete_rows < 2:
            self._explain(
                explanation,
                f"Not {name} because fewer than 2 complete rows: [{complete_rows}]",
            )
            return False

        self._explain(
            explanation,
            f"Deciding sample is {name}"
            + (" with a truncated final record" if truncated else ""),
        )
        return True

    @staticmethod
    def _explain(explanation, message):
        logger.debug(message)
        explanation.append(message)
