"""Command protocol extraction for bot_lanes.

Model output may embed control tags that request side effects instead
of being shown to the user:

    %Reaction(<emoji>)%   react to the originating message
    %sendGif%             send a random cached animation

Extraction is a pure text transform. Tags are processed one variant at
a time in a fixed order (reaction first, then media), each pass working
on the text left by the previous one. Only the first occurrence of a
tag is consumed per pass.
"""

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from bot_lanes.models.command import Command, ReactionCommand, SendMediaCommand

__all__ = [
    "DEFAULT_TAGS",
    "REACTION_PATTERN",
    "SEND_MEDIA_PATTERN",
    "CommandProtocol",
    "CommandTag",
    "ParsedResponse",
    "extract",
]

REACTION_PATTERN = re.compile(r"%Reaction\(([^)]+)\)%")
SEND_MEDIA_PATTERN = re.compile(r"%sendGif%")


def extract(raw_text: str, pattern: re.Pattern[str]) -> tuple[str | None, str]:
    """Remove the first occurrence of a tag from text.

    For a pattern with one capturing group the extracted value is the
    group; for a flag-only pattern (no groups) it is the matched tag
    itself.

    Args:
        raw_text: Text to scan
        pattern: Compiled tag pattern

    Returns:
        (value, remaining_text). On a match the tag span is removed and
        the remainder is stripped of surrounding whitespace. Without a
        match the value is None and the text is returned unchanged.
    """
    match = pattern.search(raw_text)
    if match is None:
        return None, raw_text
    value = match.group(1) if pattern.groups else match.group(0)
    remaining = raw_text[: match.start()] + raw_text[match.end() :]
    return value, remaining.strip()


@dataclass(frozen=True)
class CommandTag:
    """One recognized tag variant.

    Attributes:
        name: Variant name (for diagnostics)
        pattern: Compiled tag pattern; at most one capturing group
        build: Turns the extracted value into a command
    """

    name: str
    pattern: re.Pattern[str]
    build: Callable[[str], Command]

    def __post_init__(self) -> None:
        if self.pattern.groups > 1:
            raise ValueError(f"tag '{self.name}' must have at most one capturing group")


@dataclass(frozen=True)
class ParsedResponse:
    """Model output split into visible text and commands."""

    text: str
    commands: list[Command] = field(default_factory=list)

    @property
    def reaction(self) -> ReactionCommand | None:
        return next((c for c in self.commands if isinstance(c, ReactionCommand)), None)

    @property
    def wants_media(self) -> bool:
        return any(isinstance(c, SendMediaCommand) for c in self.commands)


DEFAULT_TAGS: tuple[CommandTag, ...] = (
    CommandTag(
        name="reaction",
        pattern=REACTION_PATTERN,
        build=lambda value: ReactionCommand(symbol=value),
    ),
    CommandTag(
        name="send_media",
        pattern=SEND_MEDIA_PATTERN,
        build=lambda _value: SendMediaCommand(),
    ),
)
"""Pass order: reaction first, then media. New tags are appended."""


class CommandProtocol:
    """Ordered multi-pass tag extractor.

    Example:
        protocol = CommandProtocol()
        parsed = protocol.parse("Nice! %Reaction(👍)%")
        parsed.text       # "Nice!"
        parsed.reaction   # ReactionCommand(symbol="👍")
    """

    def __init__(self, tags: Sequence[CommandTag] = DEFAULT_TAGS) -> None:
        self._tags = tuple(tags)

    @property
    def tags(self) -> tuple[CommandTag, ...]:
        return self._tags

    def parse(self, raw_text: str) -> ParsedResponse:
        """Extract every registered tag from model output, in pass order."""
        text = raw_text
        commands: list[Command] = []
        for tag in self._tags:
            value, text = extract(text, tag.pattern)
            if value is not None:
                commands.append(tag.build(value))
        return ParsedResponse(text=text, commands=commands)
