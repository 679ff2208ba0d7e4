from abc import ABC, abstractmethod
import logging

from .log_core import StructureResult, TimestampField

logger = logging.getLogger(__name__)


class BaseStructureFinder(ABC):

    format_type = None

    def __init__(self):
        self.name = self.__class__.__name__

    @abstractmethod
    def can_create_from_sample(self, sample, explanation=None) -> bool:
        """Cheap check for whether the sample could be in this format."""
        pass

    @abstractmethod
    def create_from_sample(self, sample, explanation=None) -> StructureResult:
        """Work out the structure of a sample already known to be in this format."""
        pass

    def preprocess_lines(self, sample):
        """Split sample into lines, dropping blank ones."""
        processed = []
        for line in sample.split("\n"):
            line = line.rstrip("\r")
            if line.strip():
                processed.append(line)
        return processed

    @staticmethod
    def build_timestamp_field(field_name, timestamp_match) -> TimestampField:
        return TimestampField(
            name=field_name,
            format_id=timestamp_match.format_id,
            date_format=timestamp_match.date_format,
            grok_pattern_name=timestamp_match.grok_pattern_name,
            simple_pattern=timestamp_match.simple_pattern.pattern,
        )

    def explain(self, explanation, message):
        logger.debug(f"{self.name}: {message}")
        if explanation is not None:
            explanation.append(message)
