import pytest

from log_shape.inference.errors import InternalInvariantError
from log_shape.inference.grok import Grok
from log_shape.inference.grok_pattern_creator import (
    GrokPatternCandidate,
    GrokPatternCreator,
    ORDERED_CANDIDATE_GROK_PATTERNS,
    Snippet,
    create_grok_pattern_from_examples,
)


def assert_matches_all(pattern, messages):
    grok = Grok(pattern)
    for message in messages:
        assert grok.captures(message) is not None, message


def test_build_field_name():
    creator = GrokPatternCreator(["x"])

    assert creator.build_field_name("field") == "field"
    assert creator.build_field_name("field") == "field2"
    assert creator.build_field_name("ipaddress") == "ipaddress"
    assert creator.build_field_name("field") == "field3"


def test_two_ip_addresses_per_message():
    messages = [
        "from 10.1.2.3 to 192.168.0.1 ok",
        "src 10.0.0.7 dst 172.16.5.4 dropped",
    ]
    pattern, mappings = create_grok_pattern_from_examples(messages)

    assert pattern == ".*? %{IP:ipaddress} .*? %{IP:ipaddress2} .*"
    assert list(mappings.items()) == [("ipaddress", "ip"), ("ipaddress2", "ip")]
    assert_matches_all(pattern, messages)


def test_seeded_with_timestamp():
    messages = [
        "[ERROR] [2014-06-23T00:00:00Z] Failed to connect",
        "[DEBUG] [2014-06-23T00:00:01Z] Retrying connection",
        "[ERROR] [2014-06-23T00:00:02Z] Giving up",
    ]
    pattern, mappings = create_grok_pattern_from_examples(
        messages, "TIMESTAMP_ISO8601", "timestamp"
    )

    assert pattern == r"\[%{LOGLEVEL:loglevel}\] \[%{TIMESTAMP_ISO8601:timestamp}\] .*"
    assert mappings == {"timestamp": "date", "loglevel": "keyword"}
    assert_matches_all(pattern, messages)


def test_integer_field():
    messages = ["took 15 ms", "took 230 ms"]
    pattern, mappings = create_grok_pattern_from_examples(messages)

    assert pattern == ".*? %{INT:field} .*"
    assert mappings == {"field": "long"}


def test_quoted_string_type_comes_from_values():
    messages = ['user "alice" logged in', 'user "bob" logged in']
    creator = GrokPatternCreator(messages)
    pattern = creator.create_grok_pattern()

    assert pattern == ".*? %{QUOTEDSTRING:field} .*"
    assert creator.mappings == {"field": "keyword"}
    assert creator.field_values["field"] == ['"alice"', '"bob"']


def test_no_candidates_gives_wildcard():
    pattern, mappings = create_grok_pattern_from_examples(["alpha one", "beta two"])

    assert pattern == ".*"
    assert mappings == {}


def test_explanation_records_pattern():
    explanation = []
    create_grok_pattern_from_examples(["took 15 ms"], explanation=explanation)
    assert any("%{INT:field}" in line for line in explanation)


def test_no_messages_fails():
    with pytest.raises(ValueError):
        GrokPatternCreator([]).create_grok_pattern()


def test_split_failure_is_invariant_error():
    candidate = GrokPatternCandidate("INT", "long", "field")
    snippets = [Snippet.whole("12"), Snippet.whole("no digits")]
    with pytest.raises(InternalInvariantError, match="INT"):
        GrokPatternCreator.populate_prefaces_and_epilogues(snippets, candidate)


def test_populate_prefaces_and_epilogues():
    candidate = GrokPatternCandidate("INT", "long", "field")
    prefaces, captured, epilogues = GrokPatternCreator.populate_prefaces_and_epilogues(
        [Snippet.whole("a 1 b"), Snippet("xx cc 22 dd", 3, 11)], candidate
    )

    assert [snippet.text for snippet in prefaces] == ["a ", "cc "]
    assert captured == ["1", "22"]
    assert [snippet.text for snippet in epilogues] == [" b", " dd"]
    assert epilogues[1] == Snippet("xx cc 22 dd", 8, 11)


def test_candidate_sees_text_around_snippet():
    candidate = GrokPatternCandidate("NUMBER", "double", "field", r"(?<![\w.+-])")
    message = "1.2.3 done"

    assert candidate.find(Snippet.whole(".3 done")).group("this") == ".3"
    assert candidate.find(Snippet(message, 3, len(message))) is None


def test_candidate_match_must_fit_in_snippet():
    candidate = GrokPatternCandidate("INT", "long", "field")

    assert candidate.find(Snippet("took 15 ms", 0, 6)) is None
    assert candidate.find(Snippet("took 15 ms", 0, 7)).group("this") == "15"


def test_version_numbers():
    messages = ["version 1.2.3 started", "version 4.5.6 started"]
    pattern, mappings = create_grok_pattern_from_examples(messages)

    assert pattern == ".*? %{NUMBER:field}.*"
    assert mappings == {"field": "double"}
    assert_matches_all(pattern, messages)


def test_version_numbers_after_timestamp():
    messages = [
        "2018-05-17T13:41:23Z release 1.2.3 deployed",
        "2018-05-17T13:41:24Z release 4.5.6 deployed",
    ]
    pattern, _ = create_grok_pattern_from_examples(
        messages, "TIMESTAMP_ISO8601", "timestamp"
    )

    assert pattern == "%{TIMESTAMP_ISO8601:timestamp} .*? %{NUMBER:field}.*"
    assert_matches_all(pattern, messages)


@pytest.mark.parametrize(
    "messages",
    [
        ["version 1.2.3 started", "version 10.20.30 started"],
        ["v1.2.3-rc1 built", "v2.0.1-rc7 built"],
        ["x=.5 y=-3 z=+7", "x=1.25 y=-30 z=+1"],
        ["conn 10.0.0.1:8080 open", "conn 192.168.1.20:443 open"],
        ["id 0x1F.2 at 3.4.5", "id 0xA0.7 at 6.7.8"],
        ["a-1 b-2.5 c-3", "a-10 b-20.5 c-30"],
        ['say "hi" 1.2.3.x', 'say "bye" 4.5.6.y'],
        ["12:30:45.1.2 tick", "01:02:03.4.5 tick"],
        ["2018-05-17 1.2.3", "2019-01-02 4.5.6"],
    ],
)
def test_pattern_matches_every_example(messages):
    pattern, _ = create_grok_pattern_from_examples(messages)
    assert_matches_all(pattern, messages)


@pytest.mark.parametrize(
    "snippets,expected",
    [
        ([], ""),
        ([""], ""),
        (["", ""], ""),
        (["["], r"\["),
        (["[ERROR] ["], r"\[.*?\] \["),
        (["[DEBUG] [", "[ERROR] ["], r"\[.*?\] \["),
        (["host-1.acme.com|", "my_host.elastic.co|"], r".*?\|"),
        (["", "[non-standard] "], ".*?"),
        (["from ", "src "], ".*? "),
    ],
)
def test_add_intermediate_regex(snippets, expected):
    assert GrokPatternCreator.add_intermediate_regex(snippets) == expected


@pytest.mark.parametrize(
    "snippets,expected",
    [
        (["", ""], ""),
        (["]", "]"], r"\]"),
        (["] a", "] b"], r"\] .*"),
        (["abc", "abc"], ".*"),
        (["x", ""], ".*"),
    ],
)
def test_finalize_grok_pattern(snippets, expected):
    assert GrokPatternCreator.finalize_grok_pattern(snippets) == expected


def test_candidate_catalogue_order():
    names = [candidate.grok_pattern_name for candidate in ORDERED_CANDIDATE_GROK_PATTERNS]

    assert names.index("TIMESTAMP_ISO8601") < names.index("DATE") < names.index("LOGLEVEL")
    assert names.index("IP") < names.index("QUOTEDSTRING") < names.index("INT")
    assert names[-1] == "BASE16NUM"
