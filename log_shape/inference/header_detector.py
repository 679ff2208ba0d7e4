import logging

from .edit_distance import levenshtein_distance
from .log_core import HeaderDecision

logger = logging.getLogger(__name__)


class HeaderDetector:
    """
    Decides whether the first row of a delimited sample is a header.

    A header row is usually shorter than the data rows and made of names
    rather than values, so it either stands out on length alone or is
    further, in edit distance, from the data rows than they are from each
    other.
    """

    MIN_ROWS_FOR_TEST = 3

    def __init__(self, max_comparisons=100, length_tolerance=0.1, distance_ratio=1.2):
        self.max_comparisons = max_comparisons
        self.length_tolerance = length_tolerance
        self.distance_ratio = distance_ratio

    def find_header(self, rows, explanation=None) -> HeaderDecision:
        """
        Args:
            rows: Complete rows of the sample, each a list of field values
            explanation: Optional list that receives diagnostic lines

        Returns:
            HeaderDecision with column names taken from the first row if it
            is a header, otherwise column1, column2, ...
        """
        if not rows:
            raise ValueError("Cannot look for a header without any rows")

        first_row = rows[0]
        if len(rows) < self.MIN_ROWS_FOR_TEST:
            message = f"Assuming header is present as only [{len(rows)}] rows"
            is_header = True
        else:
            is_header = self.is_first_row_unusual(rows)
            message = f"First row {'is' if is_header else 'is not'} a header"

        logger.debug(message)
        if explanation is not None:
            explanation.append(message)

        if is_header:
            return HeaderDecision(True, tuple(first_row))
        return HeaderDecision(
            False, tuple(f"column{num}" for num in range(1, len(first_row) + 1))
        )

    def is_first_row_unusual(self, rows) -> bool:
        if len(rows) < self.MIN_ROWS_FOR_TEST:
            raise ValueError(
                f"Need at least {self.MIN_ROWS_FOR_TEST} rows, got {len(rows)}"
            )

        first_row = "".join(rows[0])
        other_rows = ["".join(row) for row in rows[1:]]

        # Length test
        other_lengths = [len(row) for row in other_rows]
        min_length = min(other_lengths)
        max_length = max(other_lengths)
        tolerance = (max_length - min_length) * self.length_tolerance
        if not (min_length - tolerance <= len(first_row) <= max_length + tolerance):
            logger.debug(
                f"First row is unusual based on length test: [{len(first_row)}] "
                f"vs [{min_length}, {max_length}]"
            )
            return True

        logger.debug(
            f"First row is not unusual based on length test: [{len(first_row)}] "
            f"vs [{min_length}, {max_length}]"
        )

        # Edit distance test
        first_row_distances = [
            levenshtein_distance(first_row, other_row)
            for other_row in other_rows[: self.max_comparisons]
        ]
        first_row_average = sum(first_row_distances) / len(first_row_distances)

        other_row_distances = []
        for i in range(len(other_rows)):
            for j in range(i + 1, len(other_rows)):
                if len(other_row_distances) >= self.max_comparisons:
                    break
                other_row_distances.append(
                    levenshtein_distance(other_rows[i], other_rows[j])
                )
            if len(other_row_distances) >= self.max_comparisons:
                break
        other_row_average = sum(other_row_distances) / len(other_row_distances)

        is_unusual = first_row_average > other_row_average * self.distance_ratio
        logger.debug(
            f"First row {'is' if is_unusual else 'is not'} unusual based on edit "
            f"distance test: [{first_row_average:.1f}] vs [{other_row_average:.1f}]"
        )
        return is_unusual
