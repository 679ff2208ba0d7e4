import logging

from .base_finder import BaseStructureFinder
from .errors import InternalInvariantError
from .grok import Grok
from .grok_pattern_creator import GrokPatternCandidate, GrokPatternCreator, Snippet
from .log_core import FieldInfo, LogFormat, StructureResult
from .timestamp_finder import TimestampFormatFinder

logger = logging.getLogger(__name__)

TIMESTAMP_FIELD_NAME = "timestamp"


class TextStructureFinder(BaseStructureFinder):
    """
    Structure of free text samples.

    If most lines carry a timestamp, lines starting with one start a new
    message and the other lines are continuations of the message before.
    Otherwise every line is a message.  A grok pattern that matches every
    message is then built, seeded with the timestamp where there is one.
    """

    format_type = LogFormat.TEXT

    # Weight of a timestamp vote falls off with the length of its preface
    PREFACE_LENGTH_SCALE = 15.0
    PREFACE_WEIGHT_EXPONENT = -1.1

    def can_create_from_sample(self, sample, explanation=None) -> bool:
        if "\n" not in sample:
            self.explain(explanation, "Not text because sample contains no newlines")
            return False
        if not sample.replace("\n", ""):
            self.explain(explanation, "Not text because sample contains only newlines")
            return False
        self.explain(explanation, "Deciding sample is text")
        return True

    def create_from_sample(self, sample, explanation=None) -> StructureResult:
        explanation = [] if explanation is None else explanation
        lines = self.preprocess_lines(sample)

        timestamp_match = self.most_likely_timestamp(lines)
        timestamp_field = None
        multiline_start_pattern = None

        if timestamp_match is not None:
            seed = GrokPatternCandidate(
                timestamp_match.grok_pattern_name, "date", TIMESTAMP_FIELD_NAME
            )
            messages, prefaces = self.group_messages(
                lines, timestamp_match.simple_pattern, seed
            )
            if not messages:
                self.explain(
                    explanation,
                    f"No line starts with a [{timestamp_match.grok_pattern_name}] timestamp",
                )
                timestamp_match = None

        if timestamp_match is None:
            self.explain(explanation, "No timestamp found, treating every line as a message")
            messages = lines
            creator = GrokPatternCreator(messages, explanation)
            pattern = creator.create_grok_pattern()
        else:
            self.explain(
                explanation,
                f"Most likely timestamp format is [{timestamp_match.format_id}]",
            )
            creator = GrokPatternCreator(messages, explanation)
            pattern = creator.create_grok_pattern(
                timestamp_match.grok_pattern_name, TIMESTAMP_FIELD_NAME
            )
            timestamp_field = self.build_timestamp_field(
                TIMESTAMP_FIELD_NAME, timestamp_match
            )
            multiline_start_pattern = self.create_multiline_message_start_regex(
                prefaces, timestamp_match.simple_pattern.pattern
            )

        self.verify_pattern(pattern, messages)

        schema = {}
        for field_name, data_type in creator.mappings.items():
            field_info = FieldInfo(name=field_name, data_type=data_type)
            for value in creator.field_values.get(field_name, []):
                field_info.add_sample_value(value)
            schema[field_name] = field_info

        result = StructureResult(
            format_type=self.format_type,
            schema=schema,
            timestamp_field=timestamp_field,
            extraction_pattern=pattern,
            multiline_start_pattern=multiline_start_pattern,
            metadata={
                "explanation": explanation,
                "num_lines_analyzed": len(lines),
                "num_messages_analyzed": len(messages),
            },
        )
        for message in messages:
            result.add_sample_message(message)
        return result

    def most_likely_timestamp(self, lines):
        """
        Vote for the timestamp format of the sample.

        Each line votes for the format of the first timestamp in it, and a
        vote counts for less the further into the line the timestamp is.
        Voting stops once the leader cannot be caught.
        """
        votes = {}
        remaining = len(lines)
        for line in lines:
            remaining -= 1
            match = TimestampFormatFinder.find_first_match(line)
            if match is None:
                continue

            weight = (
                1 + len(match.preface) / self.PREFACE_LENGTH_SCALE
            ) ** self.PREFACE_WEIGHT_EXPONENT
            vote = votes.setdefault(match.candidate_index, [match, 0.0])
            vote[1] += weight

            weights = sorted((vote[1] for vote in votes.values()), reverse=True)
            runner_up = weights[1] if len(weights) > 1 else 0.0
            if weights[0] - runner_up > remaining:
                logger.debug(f"Stopping timestamp vote with {remaining} lines left")
                break

        best_match = None
        best_weight = 0.0
        for match, weight in votes.values():
            if weight > best_weight:
                best_match, best_weight = match, weight
        return best_match

    @staticmethod
    def group_messages(lines, simple_pattern, seed=None):
        """
        Join continuation lines onto the message they belong to.

        A line starts a message when simple_pattern finds a timestamp in it
        and, if given, the seed candidate matches it too.  Lines that only
        pass the looser simple pattern are continuations.

        Returns:
            Tuple of (messages, distinct text before the timestamp on
            message start lines)
        """
        messages = []
        prefaces = set()
        current = None
        for line in lines:
            found = simple_pattern.search(line)
            if found is not None and seed is not None:
                if seed.find(Snippet.whole(line)) is None:
                    logger.debug(f"Timestamp in [{line}] is not a [{seed.grok_pattern_name}]")
                    found = None
            if found is not None:
                if current is not None:
                    messages.append(current)
                current = line
                prefaces.add(line[: found.start()])
            elif current is not None:
                current += "\n" + line
            else:
                logger.debug(f"Dropping line before first message: {line}")

        if current is not None:
            messages.append(current)
        return messages, prefaces

    @staticmethod
    def create_multiline_message_start_regex(prefaces, simple_regex):
        return (
            "^"
            + GrokPatternCreator.add_intermediate_regex(sorted(prefaces))
            + simple_regex
        )

    @staticmethod
    def verify_pattern(pattern, messages):
        grok = Grok(pattern)
        for message in messages:
            if grok.captures(message) is None:
                raise InternalInvariantError(
                    f"Created grok pattern [{pattern}] does not match message [{message}]"
                )
