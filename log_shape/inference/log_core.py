from enum import Enum
from dataclasses import dataclass, field


class LogFormat(Enum):
    CSV = "csv"
    TSV = "tsv"
    SEMI_COLON_SEPARATED = "semi_colon_separated_values"
    PIPE_SEPARATED = "pipe_separated_values"
    TEXT = "semi_structured_text"


@dataclass
class FieldInfo:

    name: str
    data_type: str
    sample_values: list = field(default_factory=list)

    def add_sample_value(self, value, max_samples=10):
        if len(self.sample_values) < max_samples and value not in self.sample_values:
            self.sample_values.append(value)


@dataclass(frozen=True)
class HeaderDecision:

    is_header_present: bool
    column_names: tuple


@dataclass(frozen=True)
class TimestampField:

    name: str
    format_id: str
    date_format: str
    grok_pattern_name: str
    simple_pattern: str


@dataclass
class StructureResult:

    format_type: LogFormat
    schema: dict
    timestamp_field: TimestampField = None
    header_present: bool = None
    column_names: list = None
    delimiter: str = None
    extraction_pattern: str = None
    multiline_start_pattern: str = None
    sample_messages: list = field(default_factory=list)
    metadata: dict = field(default_factory=dict)

    @property
    def fields(self):
        """Ordered mapping of field name to inferred type."""
        return {name: info.data_type for name, info in self.schema.items()}

    def add_sample_message(self, message, max_samples=5):
        if len(self.sample_messages) < max_samples:
            self.sample_messages.append(message)
