from datetime import datetime, timedelta, timezone

from voicenotes.models import Summary
from voicenotes.render import render_note

CEST = timezone(timedelta(hours=2))
RECORDED_AT = datetime(2024, 5, 1, 9, 0, tzinfo=CEST)


def test_render_front_matter_body_and_transcript():
    note = render_note(
        Summary(headline="Quick note", body="- said hello\n- said goodbye"),
        "Hello world",
        "2024-05-01 at 09.00.m4a",
        RECORDED_AT,
    )

    assert note == (
        "---\n"
        'source: "[[2024-05-01 at 09.00.m4a]]"\n'
        'summary: "Quick note"\n'
        'timestamp: "2024-05-01T09:00:00.000+02:00"\n'
        "tags:\n"
        "  - fromvoicenote\n"
        "---\n"
        "- said hello\n"
        "- said goodbye\n"
        "\n"
        "## Original transcript\n"
        "\n"
        "Hello world"
    )


def test_render_is_deterministic():
    summary = Summary(headline="Plans", body="- first\n- second")
    first = render_note(summary, "transcript", "a.mp3", RECORDED_AT)
    second = render_note(summary, "transcript", "a.mp3", RECORDED_AT)
    assert first == second


def test_headline_quotes_are_escaped():
    note = render_note(Summary(headline='Call "Bob" at C:\\work', body=""), "t", "a.mp3", RECORDED_AT)
    assert 'summary: "Call \\"Bob\\" at C:\\\\work"' in note


def test_transcript_can_be_left_out():
    note = render_note(Summary(headline="h", body="- b"), "secret words", "a.mp3", RECORDED_AT, include_transcript=False)
    assert "Original transcript" not in note
    assert "secret words" not in note
    assert note.endswith("---\n- b")
