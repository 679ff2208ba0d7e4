import pytest

from log_shape.inference.delimited_reader import CSV_PRESET, TSV_PRESET, PIPE_PRESET
from log_shape.inference.errors import MalformedInputError
from log_shape.inference.log_core import LogFormat, StructureResult
from log_shape.inference.structured_finders import (
    DelimitedStructureFinder,
    csv_finder,
    tsv_finder,
)


@pytest.fixture
def complete_csv():
    return (
        "time,message\n"
        "2018-05-17T13:41:23,hello\n"
        "2018-05-17T13:41:32,hello again\n"
    )


@pytest.fixture
def farequote_csv():
    return (
        "2014-06-23 00:00:00Z,AAL,132.2046,farequote\n"
        "2014-06-23 00:00:00Z,JZA,990.4628,farequote\n"
        "2014-06-23 00:00:01Z,JBU,877.5927,farequote\n"
        "2014-06-23 00:00:01Z,KLM,1355.4812,farequote\n"
    )


def test_complete_csv(complete_csv):
    finder = csv_finder()
    assert finder.can_create_from_sample(complete_csv)

    result = finder.create_from_sample(complete_csv)

    assert isinstance(result, StructureResult)
    assert result.format_type == LogFormat.CSV
    assert result.header_present is True
    assert result.column_names == ["time", "message"]
    assert result.fields == {"time": "date", "message": "keyword"}
    assert result.timestamp_field.name == "time"
    assert result.timestamp_field.date_format == "ISO8601"
    assert result.delimiter == ","
    assert result.multiline_start_pattern == r"^\b\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}"
    assert result.metadata["rows_processed"] == 2


def test_csv_without_header(farequote_csv):
    result = csv_finder().create_from_sample(farequote_csv)

    assert result.header_present is False
    assert result.column_names == ["column1", "column2", "column3", "column4"]
    assert result.fields == {
        "column1": "date",
        "column2": "keyword",
        "column3": "double",
        "column4": "keyword",
    }
    assert result.timestamp_field.name == "column1"
    assert result.timestamp_field.date_format == "YYYY-MM-dd HH:mm:ssZ"
    assert result.metadata["rows_processed"] == 4


def test_csv_with_incomplete_last_record():
    sample = (
        "message,time\n"
        '"hello\n'
        'world",2018-05-17T13:41:23\n'
        '"hello again\n'
    )
    finder = csv_finder()
    assert finder.can_create_from_sample(sample)

    result = finder.create_from_sample(sample)

    assert result.header_present is True
    assert result.column_names == ["message", "time"]
    assert result.timestamp_field.name == "time"
    assert result.multiline_start_pattern == r"^.*?,\b\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}"
    assert result.metadata["truncated"] is True
    assert result.metadata["rows_processed"] == 1
    assert result.schema["message"].sample_values == ["hello\nworld"]


def test_short_last_row_is_dropped():
    sample = "host,count\nweb-1,10\nweb-2,20\nweb-3,30\nweb-"
    result = csv_finder().create_from_sample(sample)

    assert result.metadata["truncated"] is True
    assert result.metadata["rows_processed"] == 3
    assert result.fields == {"host": "keyword", "count": "long"}
    assert result.timestamp_field is None
    assert result.multiline_start_pattern is None


def test_tsv_timestamp_in_second_column():
    sample = (
        "value\ttime\n"
        "1\t2018-05-17T13:41:23\n"
        "2\t2018-05-17T13:41:32\n"
        "3\t2018-05-17T13:41:40\n"
    )
    finder = tsv_finder()
    result = finder.create_from_sample(sample)

    assert result.format_type == LogFormat.TSV
    assert result.fields == {"value": "long", "time": "date"}
    assert result.multiline_start_pattern == r"^.*?\t\b\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}"


def test_multiline_start_pattern_escapes_delimiter():
    finder = DelimitedStructureFinder(PIPE_PRESET, LogFormat.PIPE_SEPARATED)
    assert finder.make_multiline_start_pattern(2, "X") == r"^.*?\|.*?\|X"


def test_duplicate_header_names_made_unique():
    sample = (
        "host,host,status_code_returned\n"
        "a,b,1\n"
        "c,d,2\n"
        "e,f,3\n"
    )
    result = csv_finder().create_from_sample(sample)

    assert result.column_names == ["host", "host2", "status_code_returned"]
    assert result.fields == {
        "host": "keyword",
        "host2": "keyword",
        "status_code_returned": "long",
    }


def test_malformed_csv_fails():
    with pytest.raises(MalformedInputError):
        csv_finder().create_from_sample('a,b\n"x"y,2\n3,4\n')


def test_explanation_collected(complete_csv):
    explanation = []
    result = DelimitedStructureFinder(CSV_PRESET).create_from_sample(
        complete_csv, explanation
    )

    assert result.metadata["explanation"] is explanation
    assert any("header" in line for line in explanation)
    assert any("Timestamp field is [time]" in line for line in explanation)


def test_tsv_finder_rejects_csv(complete_csv):
    assert not DelimitedStructureFinder(TSV_PRESET, LogFormat.TSV).can_create_from_sample(
        complete_csv
    )
