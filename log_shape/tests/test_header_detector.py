import pytest

from log_shape.inference.delimited_reader import DelimitedRecordReader, CSV_PRESET
from log_shape.inference.header_detector import HeaderDetector

FAREQUOTE_ROWS = (
    "2014-06-23 00:00:00Z,AAL,132.2046,farequote\n"
    "2014-06-23 00:00:00Z,JZA,990.4628,farequote\n"
    "2014-06-23 00:00:01Z,JBU,877.5927,farequote\n"
    "2014-06-23 00:00:01Z,KLM,1355.4812,farequote\n"
)


def read(sample):
    rows, _ = DelimitedRecordReader(CSV_PRESET).read_rows(sample)
    return rows


@pytest.fixture
def detector():
    return HeaderDetector()


def test_header_in_sample(detector):
    rows = read("time,airline,responsetime,sourcetype\n" + FAREQUOTE_ROWS)
    decision = detector.find_header(rows)

    assert decision.is_header_present
    assert decision.column_names == ("time", "airline", "responsetime", "sourcetype")


def test_header_not_in_sample(detector):
    decision = detector.find_header(read(FAREQUOTE_ROWS))

    assert not decision.is_header_present
    assert decision.column_names == ("column1", "column2", "column3", "column4")


@pytest.mark.parametrize(
    "rows",
    [
        [["2018-05-17T13:41:23", "hello"]],
        [["2018-05-17T13:41:23", "hello"], ["2018-05-17T13:41:32", "hello again"]],
    ],
)
def test_fewer_than_three_rows_assumes_header(detector, rows):
    explanation = []
    decision = detector.find_header(rows, explanation)

    assert decision.is_header_present
    assert decision.column_names == tuple(rows[0])
    assert "only" in explanation[0]


def test_first_row_unusual_on_length(detector):
    rows = [
        ["time", "message"],
        ["2018-05-17T13:41:23", "hello"],
        ["2018-05-17T13:41:32", "hello again"],
    ]
    assert detector.is_first_row_unusual(rows)


def test_first_row_unusual_on_edit_distance(detector):
    # Same length as the data rows, so only the edit distance test can tell
    rows = [
        ["abcdefgh", "ijkl"],
        ["2018-05-17", "aa"],
        ["2018-05-18", "ab"],
        ["2018-05-19", "ac"],
    ]
    assert detector.is_first_row_unusual(rows)


def test_first_row_like_the_rest(detector):
    rows = [
        ["2018-05-17", "aa"],
        ["2018-05-18", "ab"],
        ["2018-05-19", "ac"],
    ]
    assert not detector.is_first_row_unusual(rows)


def test_comparison_cap_is_configurable():
    rows = [["2018-05-%02d" % day, "x"] for day in range(1, 29)]
    assert not HeaderDetector(max_comparisons=5).is_first_row_unusual(rows)


def test_is_first_row_unusual_needs_three_rows(detector):
    with pytest.raises(ValueError):
        detector.is_first_row_unusual([["a"], ["b"]])


def test_find_header_needs_rows(detector):
    with pytest.raises(ValueError):
        detector.find_header([])
