import re
from dataclasses import dataclass, field

from .grok import Grok

PREFACE = "preface"
EPILOGUE = "epilogue"


@dataclass(frozen=True)
class CandidateTimestampFormat:
    """One timestamp grammar that the finder knows how to recognise."""

    format_id: str
    date_format: str
    simple_pattern: re.Pattern
    strict_grok_pattern: str
    grok_pattern_name: str
    strict_search_grok: Grok = field(repr=False, compare=False)
    strict_full_match_grok: Grok = field(repr=False, compare=False)


def _candidate(format_id, date_format, simple_regex, strict_grok_pattern, grok_pattern_name):
    return CandidateTimestampFormat(
        format_id=format_id,
        date_format=date_format,
        simple_pattern=re.compile(simple_regex),
        strict_grok_pattern=strict_grok_pattern,
        grok_pattern_name=grok_pattern_name,
        strict_search_grok=Grok(
            "%{DATA:" + PREFACE + "}" + strict_grok_pattern + "%{GREEDYDATA:" + EPILOGUE + "}"
        ),
        strict_full_match_grok=Grok(r"\A" + strict_grok_pattern + r"\Z"),
    )


# The first match in this list wins, so anything that is a special case of a
# later entry must come before it.  Timestamps carrying a full instant come
# before the bare date, and the broadest grammars are at the end.
ORDERED_CANDIDATE_FORMATS = (
    # Tomcat is ISO8601 with a space before the zone, which ISO8601 would
    # accept with the zone left off
    _candidate(
        "tomcat_datestamp",
        "YYYY-MM-dd HH:mm:ss,SSS Z",
        r"\b\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2},\d{3}",
        r"\b20\d{2}-%{MONTHNUM}-%{MONTHDAY} %{HOUR}:?%{MINUTE}(?::?%{SECOND})[:.,][0-9]{3} "
        r"(?:Z|[+-]%{HOUR}%{MINUTE})\b",
        "TOMCAT_DATESTAMP",
    ),
    _candidate(
        "iso8601_space_millis_zone",
        "YYYY-MM-dd HH:mm:ss,SSSZ",
        r"\b\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2},\d{3}",
        r"\b%{YEAR}-%{MONTHNUM}-%{MONTHDAY} %{HOUR}:?%{MINUTE}(?::?%{SECOND})[:.,][0-9]{3}"
        r"(?:Z|[+-]%{HOUR}%{MINUTE})\b",
        "TIMESTAMP_ISO8601",
    ),
    _candidate(
        "iso8601_space_millis_colon_zone",
        "YYYY-MM-dd HH:mm:ss,SSSZZ",
        r"\b\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2},\d{3}",
        r"\b%{YEAR}-%{MONTHNUM}-%{MONTHDAY} %{HOUR}:?%{MINUTE}(?::?%{SECOND})[:.,][0-9]{3}"
        r"(?:Z|[+-]%{HOUR}:%{MINUTE})\b",
        "TIMESTAMP_ISO8601",
    ),
    _candidate(
        "iso8601_space_millis",
        "YYYY-MM-dd HH:mm:ss,SSS",
        r"\b\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2},\d{3}",
        r"\b%{YEAR}-%{MONTHNUM}-%{MONTHDAY} %{HOUR}:?%{MINUTE}(?::?%{SECOND})[:.,][0-9]{3}\b",
        "TIMESTAMP_ISO8601",
    ),
    _candidate(
        "iso8601_space_zone",
        "YYYY-MM-dd HH:mm:ssZ",
        r"\b\d{4}-\d{2}-\d{2} \d{2}:\d{2}",
        r"\b%{YEAR}-%{MONTHNUM}-%{MONTHDAY} %{HOUR}:?%{MINUTE}(?::?%{SECOND})"
        r"(?:Z|[+-]%{HOUR}%{MINUTE})\b",
        "TIMESTAMP_ISO8601",
    ),
    _candidate(
        "iso8601_space_colon_zone",
        "YYYY-MM-dd HH:mm:ssZZ",
        r"\b\d{4}-\d{2}-\d{2} \d{2}:\d{2}",
        r"\b%{YEAR}-%{MONTHNUM}-%{MONTHDAY} %{HOUR}:?%{MINUTE}(?::?%{SECOND})"
        r"(?:Z|[+-]%{HOUR}:%{MINUTE})\b",
        "TIMESTAMP_ISO8601",
    ),
    _candidate(
        "iso8601_space",
        "YYYY-MM-dd HH:mm:ss",
        r"\b\d{4}-\d{2}-\d{2} \d{2}:\d{2}",
        r"\b%{YEAR}-%{MONTHNUM}-%{MONTHDAY} %{HOUR}:?%{MINUTE}(?::?%{SECOND})\b",
        "TIMESTAMP_ISO8601",
    ),
    _candidate(
        "iso8601",
        "ISO8601",
        r"\b\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}",
        r"\b%{TIMESTAMP_ISO8601}\b",
        "TIMESTAMP_ISO8601",
    ),
    _candidate(
        "rfc822",
        "EEE MMM dd YYYY HH:mm:ss zzz",
        r"\b[A-Z]\S{2,8} [A-Z]\S{2,8} \d{1,2} \d{4} \d{2}:\d{2}:\d{2} [A-Z]{3,4}\b",
        r"\b%{DAY} %{MONTH} %{MONTHDAY} %{YEAR} %{HOUR}:%{MINUTE}:%{SECOND} %{TZ}\b",
        "DATESTAMP_RFC822",
    ),
    _candidate(
        "rfc2822_colon_zone",
        "EEE, dd MMM YYYY HH:mm:ss ZZ",
        r"\b[A-Z]\S{2,8}, \d{1,2} [A-Z]\S{2,8} \d{4} \d{2}:\d{2}:\d{2} ",
        r"\b%{DAY}, %{MONTHDAY} %{MONTH} %{YEAR} %{HOUR}:%{MINUTE}:%{SECOND} "
        r"(?:Z|[+-]%{HOUR}:%{MINUTE})\b",
        "DATESTAMP_RFC2822",
    ),
    _candidate(
        "rfc2822",
        "EEE, dd MMM YYYY HH:mm:ss Z",
        r"\b[A-Z]\S{2,8}, \d{1,2} [A-Z]\S{2,8} \d{4} \d{2}:\d{2}:\d{2} ",
        r"\b%{DAY}, %{MONTHDAY} %{MONTH} %{YEAR} %{HOUR}:%{MINUTE}:%{SECOND} "
        r"(?:Z|[+-]%{HOUR}%{MINUTE})\b",
        "DATESTAMP_RFC2822",
    ),
    _candidate(
        "date_other",
        "EEE MMM dd HH:mm:ss zzz YYYY",
        r"\b[A-Z]\S{2,8} [A-Z]\S{2,8} \d{1,2} \d{2}:\d{2}:\d{2} [A-Z]{3,4} \d{4}\b",
        r"\b%{DAY} %{MONTH} %{MONTHDAY} %{HOUR}:%{MINUTE}:%{SECOND} %{TZ} %{YEAR}\b",
        "DATESTAMP_OTHER",
    ),
    _candidate(
        "eventlog",
        "YYYYMMddHHmmss",
        r"\b\d{14}\b",
        r"\b%{YEAR}%{MONTHNUM2}%{MONTHDAY}%{HOUR}%{MINUTE}%{SECOND}\b",
        "DATESTAMP_EVENTLOG",
    ),
    _candidate(
        "httpd_error",
        "EEE MMM dd HH:mm:ss YYYY",
        r"\b[A-Z]\S{2,8} [A-Z]\S{2,8} \d{1,2} \d{2}:\d{2}:\d{2} \d{4}\b",
        r"\b%{DAY} %{MONTH} %{MONTHDAY} %{HOUR}:%{MINUTE}:%{SECOND} %{YEAR}\b",
        "HTTPDERROR_DATE",
    ),
    _candidate(
        "http_date",
        "dd/MMM/YYYY:HH:mm:ss Z",
        r"\b\d{2}/[A-Z]\S{2}/\d{4}:\d{2}:\d{2}:\d{2} ",
        r"\b%{MONTHDAY}/%{MONTH}/%{YEAR}:%{HOUR}:%{MINUTE}:%{SECOND} [+-]?%{HOUR}%{MINUTE}\b",
        "HTTPDATE",
    ),
    _candidate(
        "catalina",
        "MMM dd, YYYY K:mm:ss a",
        r"\b[A-Z]\S{2,8} \d{1,2}, \d{4} \d{1,2}:\d{2}:\d{2} [AP]M\b",
        r"\b%{MONTH} %{MONTHDAY}, 20\d{2} %{HOUR}:%{MINUTE}:%{SECOND} (?:AM|PM)\b",
        "CATALINA_DATESTAMP",
    ),
    _candidate(
        "cisco",
        "MMM dd YYYY HH:mm:ss",
        r"\b[A-Z]\S{2,8} {1,2}\d{1,2} \d{4} \d{2}:\d{2}:\d{2}\b",
        r"\b%{MONTH} +%{MONTHDAY} %{YEAR} %{HOUR}:%{MINUTE}:%{SECOND}\b",
        "CISCOTIMESTAMP",
    ),
    _candidate(
        "syslog",
        "MMM dd HH:mm:ss",
        r"\b[A-Z]\S{2,8} {1,2}\d{1,2} \d{2}:\d{2}:\d{2}\b",
        r"\b%{MONTH} +%{MONTHDAY} %{HOUR}:%{MINUTE}:%{SECOND}\b",
        "SYSLOGTIMESTAMP",
    ),
    _candidate(
        "us_slash_datetime",
        "MM/dd/YYYY HH:mm:ss",
        r"\b\d{2}/\d{2}/\d{4} \d{2}:\d{2}:\d{2}\b",
        r"\b%{MONTHNUM2}/%{MONTHDAY}/%{YEAR} %{HOUR}:%{MINUTE}:%{SECOND}\b",
        "DATESTAMP",
    ),
    _candidate(
        "eu_slash_datetime",
        "dd/MM/YYYY HH:mm:ss",
        r"\b\d{2}/\d{2}/\d{4} \d{2}:\d{2}:\d{2}\b",
        r"\b%{MONTHDAY}/%{MONTHNUM2}/%{YEAR} %{HOUR}:%{MINUTE}:%{SECOND}\b",
        "DATESTAMP",
    ),
    _candidate(
        "unix_ms",
        "UNIX_MS",
        r"\b\d{13}\b",
        r"\b\d{13}\b",
        "POSINT",
    ),
    _candidate(
        "unix_fraction",
        "UNIX",
        r"\b\d{10}\.\d{3,9}\b",
        r"\b\d{10}\.(?:\d{3}){1,3}\b",
        "NUMBER",
    ),
    _candidate(
        "unix",
        "UNIX",
        r"\b\d{10}\b",
        r"\b\d{10}\b",
        "POSINT",
    ),
    _candidate(
        "tai64n",
        "TAI64N",
        r"\b[0-9A-Fa-f]{24}\b",
        r"\b[0-9A-Fa-f]{24}\b",
        "BASE16NUM",
    ),
    _candidate(
        "iso8601_date",
        "YYYY-MM-dd",
        r"\b\d{4}-\d{2}-\d{2}\b",
        r"\b%{YEAR}-%{MONTHNUM2}-%{MONTHDAY}\b",
        "ISO8601_DATE",
    ),
)
