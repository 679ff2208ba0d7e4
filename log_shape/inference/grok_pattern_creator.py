"""
Builds a single grok pattern that matches every one of a set of sample
messages.

The messages are repeatedly narrowed: the first catalogue pattern that
matches somewhere in every snippet becomes a named capture, and the text
before and after it in each snippet is analysed the same way.  Where nothing
in the catalogue matches, the snippets are reduced to the punctuation they
have in common, joined by wildcards.

Snippets stay attached to the message they were cut from, so word
boundaries and lookbehinds are judged against the real neighbouring text.
"""

import re
import logging
from dataclasses import dataclass, field

from .errors import InternalInvariantError
from .grok import Grok
from .utils import TypeMapper

logger = logging.getLogger(__name__)

PUNCTUATION_OR_SPACE = re.compile(r"""["'`‘’“”#@%=\\/|~:;,<>()\[\]{}«»^$*¿?¡!§¶ \t]""")
NEEDS_ESCAPING = re.compile(r"[\\|()\[\]{}^$*?]")

CAPTURE = "this"


@dataclass(frozen=True)
class Snippet:
    """The part of message between start and end."""

    message: str
    start: int
    end: int

    @classmethod
    def whole(cls, message):
        return cls(message, 0, len(message))

    @property
    def text(self) -> str:
        return self.message[self.start:self.end]


@dataclass(frozen=True)
class GrokPatternCandidate:
    """
    A library pattern that may become a named capture.

    The breaks restrict where a match may start and end; they default to word
    boundaries.  A mapping type of None means the type is worked out from the
    captured values.
    """

    grok_pattern_name: str
    mapping_type: str
    field_name: str
    pre_break: str = r"\b"
    post_break: str = r"\b"
    grok: Grok = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(
            self,
            "grok",
            Grok(
                self.pre_break
                + "%{" + self.grok_pattern_name + ":" + CAPTURE + "}"
                + self.post_break
            ),
        )

    def find(self, snippet):
        """
        Return the first match lying wholly inside snippet, or None.

        The search runs over the whole message so that the breaks see the
        characters on either side of the snippet.
        """
        regex = self.grok.regex
        pos = snippet.start
        while pos < snippet.end:
            found = regex.search(snippet.message, pos)
            if found is None or found.start() >= snippet.end:
                return None
            if found.end() <= snippet.end:
                return found
            pos = found.start() + 1
        return None


# First match wins, so specific patterns must come before generic ones
ORDERED_CANDIDATE_GROK_PATTERNS = (
    GrokPatternCandidate("TIMESTAMP_ISO8601", "date", "extra_timestamp"),
    GrokPatternCandidate("DATESTAMP_RFC822", "date", "extra_timestamp"),
    GrokPatternCandidate("DATESTAMP_RFC2822", "date", "extra_timestamp"),
    GrokPatternCandidate("DATESTAMP_OTHER", "date", "extra_timestamp"),
    GrokPatternCandidate("DATESTAMP_EVENTLOG", "date", "extra_timestamp"),
    GrokPatternCandidate("SYSLOGTIMESTAMP", "date", "extra_timestamp"),
    GrokPatternCandidate("HTTPDATE", "date", "extra_timestamp"),
    GrokPatternCandidate("CATALINA_DATESTAMP", "date", "extra_timestamp"),
    GrokPatternCandidate("TOMCAT_DATESTAMP", "date", "extra_timestamp"),
    GrokPatternCandidate("CISCOTIMESTAMP", "date", "extra_timestamp"),
    GrokPatternCandidate("DATE", "date", "date"),
    GrokPatternCandidate("TIME", "date", "time"),
    GrokPatternCandidate("LOGLEVEL", "keyword", "loglevel"),
    GrokPatternCandidate("URI", "keyword", "uri"),
    GrokPatternCandidate("UUID", "keyword", "uuid"),
    GrokPatternCandidate("MAC", "keyword", "macaddress"),
    # Slashes are not word characters
    GrokPatternCandidate("PATH", "keyword", "path", r"(?<!\w)", r"(?!\w)"),
    GrokPatternCandidate("EMAILADDRESS", "keyword", "email"),
    GrokPatternCandidate("IP", "ip", "ipaddress"),
    # Quotes delimit the match already
    GrokPatternCandidate("QUOTEDSTRING", None, "field", "", ""),
    # A leading minus sign is not a word character
    GrokPatternCandidate("INT", "long", "field", r"(?<![\w.+-])", r"(?![\w.])"),
    GrokPatternCandidate("NUMBER", "double", "field", r"(?<![\w.+-])"),
    GrokPatternCandidate("BASE16NUM", "keyword", "field", r"(?<![\w.+-])"),
)


def _escape(char):
    return "\\" + char if NEEDS_ESCAPING.match(char) else char


class GrokPatternCreator:
    """
    Holds the state of one pattern synthesis: how often each field name has
    been handed out, and the type and captured values of each field.
    """

    def __init__(self, sample_messages, explanation=None):
        self.sample_messages = list(sample_messages)
        self.explanation = [] if explanation is None else explanation
        self.field_name_counts = {}
        self.mappings = {}
        self.field_values = {}

    def create_grok_pattern(
        self, seed_pattern_name=None, seed_field_name=None, seed_mapping_type="date"
    ) -> str:
        """
        Build the pattern, optionally starting from a seed capture that is
        known to occur in every message (usually the message timestamp).

        After this returns, mappings holds every field of the pattern in
        the order the fields were named.
        """
        if not self.sample_messages:
            raise ValueError("Cannot create a grok pattern without sample messages")

        snippets = [Snippet.whole(message) for message in self.sample_messages]
        if seed_pattern_name is None:
            pattern = self.append_best_grok_match_for_strings(snippets, is_last=True)
        else:
            seed = GrokPatternCandidate(
                seed_pattern_name, seed_mapping_type, seed_field_name
            )
            output_field_name = self.build_field_name(seed.field_name)
            self.mappings[output_field_name] = seed.mapping_type
            pattern = self.process_candidate_and_split(
                seed, output_field_name, True, snippets
            )

        for field_name, mapping_type in self.mappings.items():
            if mapping_type is None:
                self.mappings[field_name] = TypeMapper.guess_type(
                    field_name, self.field_values[field_name]
                )

        logger.debug(f"Created grok pattern [{pattern}]")
        self.explanation.append(f"Created grok pattern [{pattern}]")
        return pattern

    def process_candidate_and_split(self, candidate, output_field_name, is_last, snippets):
        prefaces, captured, epilogues = self.populate_prefaces_and_epilogues(
            snippets, candidate
        )
        self.field_values.setdefault(output_field_name, []).extend(captured)

        return (
            self.append_best_grok_match_for_strings(prefaces, is_last=False)
            + "%{" + candidate.grok_pattern_name + ":" + output_field_name + "}"
            + self.append_best_grok_match_for_strings(epilogues, is_last=is_last)
        )

    def append_best_grok_match_for_strings(self, snippets, is_last) -> str:
        best_candidate = None
        if snippets:
            for candidate in ORDERED_CANDIDATE_GROK_PATTERNS:
                if all(candidate.find(snippet) is not None for snippet in snippets):
                    best_candidate = candidate
                    break

        if best_candidate is None:
            texts = [snippet.text for snippet in snippets]
            if is_last:
                return self.finalize_grok_pattern(texts)
            return self.add_intermediate_regex(texts)

        output_field_name = self.build_field_name(best_candidate.field_name)
        self.mappings[output_field_name] = best_candidate.mapping_type
        logger.debug(
            f"Snippets all match [{best_candidate.grok_pattern_name}], "
            f"capturing as [{output_field_name}]"
        )
        return self.process_candidate_and_split(
            best_candidate, output_field_name, is_last, snippets
        )

    @staticmethod
    def populate_prefaces_and_epilogues(snippets, candidate):
        """
        Split each snippet around the first match of the candidate.

        Returns:
            Tuple of (preface snippets, captured values, epilogue snippets)

        Raises:
            InternalInvariantError: if the candidate does not match a snippet
        """
        prefaces = []
        captured = []
        epilogues = []
        for snippet in snippets:
            found = candidate.find(snippet)
            if found is None:
                raise InternalInvariantError(
                    f"[{candidate.grok_pattern_name}] does not match snippet [{snippet.text}]"
                )
            prefaces.append(Snippet(snippet.message, snippet.start, found.start(CAPTURE)))
            captured.append(found.group(CAPTURE))
            epilogues.append(Snippet(snippet.message, found.end(CAPTURE), snippet.end))
        return prefaces, captured, epilogues

    def build_field_name(self, field_name) -> str:
        """
        Return field_name the first time it is asked for, then field_name2,
        field_name3 and so on.
        """
        count = self.field_name_counts.get(field_name, 0) + 1
        self.field_name_counts[field_name] = count
        return field_name if count == 1 else f"{field_name}{count}"

    @staticmethod
    def add_intermediate_regex(snippets) -> str:
        """
        Regex for snippets that sit between two captures: the punctuation
        that occurs in the same order in every snippet, with lazy wildcards
        where the snippets differ.
        """
        if not snippets:
            return ""

        others = list(snippets[:-1])
        driver = snippets[-1]
        parts = []

        wildcard_required = True
        for char in driver:
            if PUNCTUATION_OR_SPACE.match(char) and all(char in other for other in others):
                if wildcard_required and any(other.index(char) > 0 for other in others):
                    parts.append(".*?")
                parts.append(_escape(char))
                wildcard_required = True
                others = [other[other.index(char) + 1:] for other in others]
            elif wildcard_required:
                parts.append(".*?")
                wildcard_required = False

        if wildcard_required and not all(other == "" for other in others):
            parts.append(".*?")

        return "".join(parts)

    @staticmethod
    def finalize_grok_pattern(snippets) -> str:
        """
        Regex for the snippets at the end of the messages: whatever
        punctuation they all start with, then a greedy wildcard for the rest.
        """
        if all(snippet == "" for snippet in snippets):
            return ""

        others = list(snippets[:-1])
        driver = snippets[-1]
        parts = []

        for index, char in enumerate(driver):
            if PUNCTUATION_OR_SPACE.match(char) and all(
                len(other) > index and other[index] == char for other in others
            ):
                parts.append(_escape(char))
                if index == len(driver) - 1 and all(other == driver for other in others):
                    return "".join(parts)
            else:
                break

        parts.append(".*")
        return "".join(parts)


def create_grok_pattern_from_examples(
    sample_messages, seed_pattern_name=None, seed_field_name=None, explanation=None
):
    """
    Returns:
        Tuple of (grok pattern, ordered mapping of field name to type)
    """
    creator = GrokPatternCreator(sample_messages, explanation)
    pattern = creator.create_grok_pattern(seed_pattern_name, seed_field_name)
    return pattern, creator.mappings
