import logging
from dataclasses import dataclass, field

from .timestamp_patterns import ORDERED_CANDIDATE_FORMATS, PREFACE, EPILOGUE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimestampMatch:
    """
    Where a catalogue timestamp was found in a piece of text.

    Two matches compare equal when they were made by the same catalogue entry
    and the text around the timestamp is the same.  The timestamp text itself
    is not compared.
    """

    candidate_index: int
    preface: str
    epilogue: str
    timestamp: str = field(compare=False)
    format_id: str = field(compare=False)
    date_format: str = field(compare=False)
    simple_pattern: object = field(compare=False, repr=False)
    grok_pattern_name: str = field(compare=False)

    @property
    def candidate(self):
        return ORDERED_CANDIDATE_FORMATS[self.candidate_index]


class TimestampFormatFinder:

    CANDIDATE_FORMATS = ORDERED_CANDIDATE_FORMATS

    @classmethod
    def find_first_match(cls, text, ignore_candidates=0):
        """
        Find the first catalogue timestamp that occurs anywhere in text.

        Args:
            text: Input text to search
            ignore_candidates: Number of leading catalogue entries to skip

        Returns:
            TimestampMatch, or None if no catalogue entry matches
        """
        for index in range(ignore_candidates, len(cls.CANDIDATE_FORMATS)):
            candidate = cls.CANDIDATE_FORMATS[index]
            captures = candidate.strict_search_grok.captures(text)
            if captures is None:
                continue

            preface = captures.get(PREFACE, "")
            epilogue = captures.get(EPILOGUE, "")
            timestamp = text[len(preface):len(text) - len(epilogue)]
            logger.debug(
                f"Timestamp '{timestamp}' matched format '{candidate.format_id}'"
            )
            return cls._build_match(index, preface, timestamp, epilogue)

        return None

    @classmethod
    def find_first_full_match(cls, text, prior_match=None):
        """
        Find the first catalogue timestamp that spans the whole of text.

        When prior_match is given the result is only returned if it was made
        by the same catalogue entry, which is how homogeneity across records
        is checked.
        """
        for index, candidate in enumerate(cls.CANDIDATE_FORMATS):
            if not candidate.strict_full_match_grok.match(text):
                continue

            if prior_match is not None and prior_match.candidate_index != index:
                logger.debug(
                    f"'{text}' is a '{candidate.format_id}' timestamp, "
                    f"expected '{prior_match.format_id}'"
                )
                return None
            return cls._build_match(index, "", text, "")

        return None

    @classmethod
    def _build_match(cls, index, preface, timestamp, epilogue):
        candidate = cls.CANDIDATE_FORMATS[index]
        return TimestampMatch(
            candidate_index=index,
            preface=preface,
            epilogue=epilogue,
            timestamp=timestamp,
            format_id=candidate.format_id,
            date_format=candidate.date_format,
            simple_pattern=candidate.simple_pattern,
            grok_pattern_name=candidate.grok_pattern_name,
        )
