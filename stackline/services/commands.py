"""
Slash-command parsing for chat messages.

A message is matched against an ordered table of patterns; the first match
wins and anything else is a plain message. Patterns must match the whole
message, ignore case, and hand back the trimmed argument.

    /stack <topic>     create a research stack
    /insight <text>    add an insight to the current stack
    /image <name>      ask the client to upload an image into the current stack
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class PlainMessage:
    text: str


@dataclass(frozen=True)
class StackCommand:
    topic: str


@dataclass(frozen=True)
class InsightCommand:
    content: str


@dataclass(frozen=True)
class ImageCommand:
    name: str


Command = PlainMessage | StackCommand | InsightCommand | ImageCommand

COMMANDS: list[tuple[re.Pattern[str], type]] = [
    (re.compile(r"/stack\s+(.+)", re.IGNORECASE), StackCommand),
    (re.compile(r"/insight\s+(.+)", re.IGNORECASE), InsightCommand),
    (re.compile(r"/image\s+(.+)", re.IGNORECASE), ImageCommand),
]


def parse_command(text: str) -> Command:
    """Classify a chat message as one of the commands or a plain message."""
    for pattern, command in COMMANDS:
        match = pattern.fullmatch(text.strip())
        if match:
            argument = match.group(1).strip()
            if argument:
                return command(argument)
    return PlainMessage(text)
