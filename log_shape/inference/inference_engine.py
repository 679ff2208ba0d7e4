import logging

from .errors import RejectedSampleError
from .log_core import StructureResult
from .structured_finders import (
    DelimitedStructureFinder,
    csv_finder,
    tsv_finder,
    semicolon_finder,
    pipe_finder,
)
from .text_finder import TextStructureFinder

logger = logging.getLogger(__name__)


class LogStructureInferenceEngine:

    def __init__(self, finders=None):
        # Order matters - delimited formats are stricter than free text
        self.finders = finders or [
            csv_finder(),
            tsv_finder(),
            semicolon_finder(),
            pipe_finder(),
            TextStructureFinder(),
        ]

        logger.debug(f"Initialized inference engine with {len(self.finders)} finders")

    def find_structure(self, sample) -> StructureResult:
        """
        Work out the structure of sample using the first finder that accepts it.

        Raises:
            RejectedSampleError: if no finder accepts the sample
        """
        explanation = []
        for finder in self.finders:
            logger.debug(f"Trying finder: {finder.name} ({finder.format_type.value})")
            if finder.can_create_from_sample(sample, explanation):
                result = finder.create_from_sample(sample, explanation)
                logger.info(f"Best match: {result.format_type.value}")
                return result
            logger.debug(f"{finder.name} rejected the sample")

        raise RejectedSampleError(
            "Sample is not in any supported format: " + "; ".join(explanation)
        )

    def get_supported_formats(self):
        return [finder.format_type.value for finder in self.finders]


def _finder_for(preset):
    if preset is None:
        return TextStructureFinder()
    for finder in (csv_finder(), tsv_finder(), semicolon_finder(), pipe_finder()):
        if finder.preset == preset:
            return finder
    return DelimitedStructureFinder(preset)


def classify(sample, preset=None) -> bool:
    """
    Cheap check for whether sample is in the delimited format described by
    preset, or free text when preset is None.
    """
    return _finder_for(preset).can_create_from_sample(sample)


def analyze(sample, preset=None) -> StructureResult:
    """
    Infer the structure of sample as the delimited format described by
    preset, or as free text when preset is None.

    Raises:
        RejectedSampleError: if the sample is not in that format
        MalformedInputError: if a delimited sample cannot be parsed
        MixedTypeError: if a field mixes object and non-object values
        InternalInvariantError: if a synthesized pattern is inconsistent
    """
    finder = _finder_for(preset)
    explanation = []
    if not finder.can_create_from_sample(sample, explanation):
        raise RejectedSampleError(
            f"Sample is not {finder.format_type.value}: " + "; ".join(explanation)
        )
    return finder.create_from_sample(sample, explanation)
