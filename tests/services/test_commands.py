"""Slash-command parsing and the insight preview."""

import pytest

from stackline.services.chat import insight_preview
from stackline.services.commands import (
    ImageCommand,
    InsightCommand,
    PlainMessage,
    StackCommand,
    parse_command,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("/stack Competitors", StackCommand("Competitors")),
        ("/STACK   Competitors  ", StackCommand("Competitors")),
        ("  /insight Competitor X raised $2M", InsightCommand("Competitor X raised $2M")),
        ("/image Logo draft", ImageCommand("Logo draft")),
    ],
)
def test_commands(text, expected):
    assert parse_command(text) == expected


@pytest.mark.parametrize(
    "text",
    [
        "hello team",
        "/stack",
        "/stack   ",
        "/stackCompetitors",
        "please /stack Competitors",
        "/unknown thing",
        "/insight line one\nline two",
        "/stack Competitors\nand some notes",
    ],
)
def test_plain_messages(text):
    assert parse_command(text) == PlainMessage(text)


def test_preview_keeps_short_content():
    assert insight_preview("hello") == "hello"
    assert insight_preview("x" * 50) == "x" * 50


def test_preview_truncates_long_content():
    assert insight_preview("x" * 51) == "x" * 50 + "..."
    assert insight_preview("abcdefghij" * 10) == "abcdefghij" * 5 + "..."
