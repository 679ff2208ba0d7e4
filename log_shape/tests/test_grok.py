import pytest

from log_shape.inference.grok import Grok
from log_shape.inference.grok_patterns import GROK_BUILTIN_PATTERNS


def test_captures_named_fields():
    grok = Grok("%{IP:client} %{WORD:verb} %{INT:status}")
    captures = grok.captures("10.1.2.3 GET 200")

    assert captures == {"client": "10.1.2.3", "verb": "GET", "status": "200"}
    assert grok.field_names == ["client", "verb", "status"]


def test_unnamed_references_are_not_captured():
    grok = Grok("%{INT} %{INT:second}")
    assert grok.captures("1 2") == {"second": "2"}


def test_captures_returns_none_without_match():
    grok = Grok(r"\A%{IP:address}\Z")
    assert grok.captures("not an address") is None
    assert not grok.match("not an address")
    assert grok.match("192.168.0.1")


def test_match_is_unanchored():
    assert Grok("%{LOGLEVEL}").match("[2018-01-01] WARN disk nearly full")


def test_wildcards_span_newlines():
    grok = Grok("%{WORD:first} %{GREEDYDATA:rest}")
    captures = grok.captures("Exception boom\n\tat Foo.bar")
    assert captures["rest"] == "boom\n\tat Foo.bar"


def test_unknown_pattern_name_rejected():
    with pytest.raises(ValueError, match="NOT_A_PATTERN"):
        Grok("%{NOT_A_PATTERN:field}")


def test_field_captured_twice_rejected():
    with pytest.raises(ValueError, match="captured twice"):
        Grok("%{INT:field} %{INT:field}")


def test_circular_reference_rejected():
    bank = {"A": "%{B}", "B": "%{A}"}
    with pytest.raises(ValueError, match="Circular"):
        Grok("%{A}", pattern_bank=bank)


@pytest.mark.parametrize(
    "name,text",
    [
        ("TIMESTAMP_ISO8601", "2018-05-17T13:41:23,553"),
        ("SYSLOGTIMESTAMP", "May 17 13:41:23"),
        ("HTTPDATE", "17/May/2018:13:41:23 +0000"),
        ("UUID", "123e4567-e89b-12d3-a456-426614174000"),
        ("MAC", "00:1b:63:84:45:e6"),
        ("IP", "2001:db8::1"),
        ("EMAILADDRESS", "someone@example.com"),
        ("URI", "https://example.com/path?q=1"),
        ("PATH", "/var/log/messages"),
        ("QUOTEDSTRING", '"hello world"'),
        ("NUMBER", "-12.5"),
    ],
)
def test_builtin_patterns_match_whole_examples(name, text):
    assert name in GROK_BUILTIN_PATTERNS
    assert Grok(r"\A%{" + name + r"}\Z").match(text)
