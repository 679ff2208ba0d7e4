import logging

from .errors import MixedTypeError
from .grok import Grok
from .log_core import FieldInfo
from .timestamp_finder import TimestampFormatFinder

logger = logging.getLogger(__name__)


class TypeMapper:

    KEYWORD_MAX_LEN = 256
    KEYWORD_MAX_SPACES = 5

    LONG_MIN = -(2**63)
    LONG_MAX = 2**63 - 1

    NUMBER_GROK = Grok(r"\A%{NUMBER}(?:[eE][+-]?[0-3]?[0-9]{1,2})?\Z")
    IP_GROK = Grok(r"\A%{IP}\Z")

    @classmethod
    def guess_type(cls, field_name, values) -> str:
        """
        Infer the storage type of a field from every value observed for it.

        Checks run in a fixed order: objects, lists, booleans, dates, numbers,
        IP addresses, and finally text versus keyword.  Dates are checked
        before numbers because many timestamps look numeric.

        Raises:
            ValueError: if there are no values
            MixedTypeError: if some but not all values are objects
        """
        if not values:
            raise ValueError(f"No values to guess the type of field [{field_name}]")

        if any(isinstance(value, dict) for value in values):
            if all(isinstance(value, dict) for value in values):
                return "object"
            raise MixedTypeError(
                f"Field [{field_name}] has both object and non-object values"
            )

        if any(isinstance(value, (list, tuple)) for value in values):
            flattened = []
            for value in values:
                if isinstance(value, (list, tuple)):
                    flattened.extend(value)
                else:
                    flattened.append(value)
            return cls.guess_type(field_name, flattened)

        strings = [cls._to_string(value) for value in values]

        if all(value in ("true", "false") for value in strings):
            return "boolean"

        timestamp_matches = {
            TimestampFormatFinder.find_first_match(value) for value in strings
        }
        if len(timestamp_matches) == 1 and None not in timestamp_matches:
            return "date"

        if all(cls.NUMBER_GROK.match(value) for value in strings):
            numeric_type = cls._guess_numeric_type(field_name, strings)
            if numeric_type is not None:
                return numeric_type
        elif all(cls.IP_GROK.match(value) for value in strings):
            return "ip"

        if any(cls.is_more_likely_text_than_keyword(value) for value in strings):
            return "text"
        return "keyword"

    @classmethod
    def is_more_likely_text_than_keyword(cls, value) -> bool:
        if len(value) > cls.KEYWORD_MAX_LEN:
            return True
        return sum(1 for char in value if char.isspace()) > cls.KEYWORD_MAX_SPACES

    @classmethod
    def _guess_numeric_type(cls, field_name, values):
        try:
            if all(cls.LONG_MIN <= int(value) <= cls.LONG_MAX for value in values):
                return "long"
            logger.debug(f"Field [{field_name}] has integers outside the long range")
        except ValueError:
            pass

        try:
            for value in values:
                float(value)
            return "double"
        except ValueError as e:
            # Matched the number grammar but is not parseable as a number
            logger.debug(f"Field [{field_name}] is not numeric after all: {e}")
            return None

    @staticmethod
    def _to_string(value):
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)


class SchemaManager:

    @staticmethod
    def guess_timestamp_field(records, explanation=None):
        """
        Find the field holding the record timestamp.

        Candidates come from the first record in field order.  The first
        candidate whose value in every other record is a timestamp of the
        same format wins.

        Returns:
            Tuple of (field_name, TimestampMatch), or None
        """
        if not records:
            return None

        first_record_matches = []
        for field_name, value in records[0].items():
            if value is None:
                continue
            match = TimestampFormatFinder.find_first_match(str(value))
            if match is None:
                continue
            if len(records) == 1:
                return field_name, match
            first_record_matches.append((field_name, match))

        for field_name, first_match in first_record_matches:
            for record in records[1:]:
                value = record.get(field_name)
                if value is None:
                    SchemaManager._explain(
                        explanation,
                        f"Timestamp field [{field_name}] ruled out because a record does not have it",
                    )
                    break
                match = TimestampFormatFinder.find_first_full_match(str(value), first_match)
                if match is None:
                    SchemaManager._explain(
                        explanation,
                        f"Timestamp field [{field_name}] ruled out because [{value}] "
                        f"is not a [{first_match.format_id}] timestamp",
                    )
                    break
            else:
                return field_name, first_match

        return None

    @staticmethod
    def guess_mappings(records, columns=None, explanation=None):
        """Return an ordered mapping of field name to FieldInfo."""
        if columns is None:
            columns = []
            for record in records:
                for field_name in record:
                    if field_name not in columns:
                        columns.append(field_name)

        schema = {}
        for field_name in columns:
            values = [
                record[field_name]
                for record in records
                if record.get(field_name) is not None
            ]
            if not values:
                continue

            data_type = TypeMapper.guess_type(field_name, values)
            field_info = FieldInfo(name=field_name, data_type=data_type)
            for value in values:
                field_info.add_sample_value(value)
            schema[field_name] = field_info
            SchemaManager._explain(
                explanation, f"Field [{field_name}] guessed to be [{data_type}]"
            )

        return schema

    @staticmethod
    def _explain(explanation, message):
        logger.debug(message)
        if explanation is not None:
            explanation.append(message)
