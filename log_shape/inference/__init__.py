"""
Log Structure Inference Engine

Infers the structure of a raw log sample well enough to generate ingestion
configuration for it.

This package provides:
- Detection of delimited formats (comma, tab, semicolon and pipe separated)
- Header row detection, with column names synthesized when there is none
- Field type inference (boolean, long, double, date, ip, keyword, text, object)
- Timestamp field and timestamp format discovery
- Grok pattern synthesis for free text logs, matching every sample message

Basic usage:
    from log_shape.inference import analyze, classify, CSV_PRESET

    if classify(sample, CSV_PRESET):
        result = analyze(sample, CSV_PRESET)

    Or let the engine pick the format:
    result = LogStructureInferenceEngine().find_structure(sample)

    print(f"Detected format: {result.format_type.value}")
    for field_name, data_type in result.fields.items():
        print(f"  {field_name}: {data_type}")
"""

from .delimited_reader import (
    DelimitedPreset,
    CSV_PRESET,
    TSV_PRESET,
    SEMICOLON_PRESET,
    PIPE_PRESET,
)
from .errors import (
    LogShapeError,
    RejectedSampleError,
    MalformedInputError,
    MixedTypeError,
    InternalInvariantError,
)
from .inference_engine import LogStructureInferenceEngine, analyze, classify
from .log_core import LogFormat, StructureResult
