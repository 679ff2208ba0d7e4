import re
import logging

from .grok_patterns import GROK_BUILTIN_PATTERNS

logger = logging.getLogger(__name__)

GROK_REFERENCE = re.compile(
    r"%\{(?P<name>[A-Za-z0-9_]+)(?::(?P<field>[A-Za-z_][A-Za-z0-9_]*))?\}"
)


class Grok:
    """
    A grok pattern compiled down to a regular expression.

    %{NAME} is replaced by the library definition of NAME and %{NAME:field}
    additionally captures the text it matched under "field".  Anything else
    in the pattern is passed through as regular expression syntax.
    """

    def __init__(self, grok_pattern, pattern_bank=None):
        self.grok_pattern = grok_pattern
        self.pattern_bank = (
            GROK_BUILTIN_PATTERNS if pattern_bank is None else pattern_bank
        )
        self.field_names = []

        expanded = self._expand(grok_pattern, ())
        try:
            self.regex = re.compile(expanded, re.DOTALL)
        except re.error as e:
            raise ValueError(f"Invalid grok pattern [{grok_pattern}]: {e}") from e

    def _expand(self, pattern, seen):
        def replace(reference):
            name = reference.group("name")
            field_name = reference.group("field")

            if name in seen:
                raise ValueError(
                    f"Circular reference to [{name}] in grok pattern [{self.grok_pattern}]"
                )
            definition = self.pattern_bank.get(name)
            if definition is None:
                raise ValueError(
                    f"Unknown grok pattern [{name}] in [{self.grok_pattern}]"
                )

            body = self._expand(definition, seen + (name,))
            if field_name is None:
                return f"(?:{body})"

            if field_name in self.field_names:
                raise ValueError(
                    f"Field [{field_name}] captured twice in grok pattern [{self.grok_pattern}]"
                )
            self.field_names.append(field_name)
            return f"(?P<{field_name}>{body})"

        return GROK_REFERENCE.sub(replace, pattern)

    def match(self, text) -> bool:
        return self.regex.search(text) is not None

    def captures(self, text):
        """
        Return the named captures of the first match in text, or None if the
        pattern does not match.  Captures that took no part in the match are
        left out.
        """
        match = self.regex.search(text)
        if match is None:
            return None
        return {
            name: value
            for name, value in match.groupdict().items()
            if value is not None
        }

    def __repr__(self):
        return f"Grok({self.grok_pattern!r})"
