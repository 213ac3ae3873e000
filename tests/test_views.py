import uuid
from datetime import datetime, timedelta, timezone

import pytest

from worktracker.models import Tag, WorkSessionWithTags
from worktracker.views import (
    format_duration,
    render_error,
    render_home,
    render_layout,
    render_session_detail,
)

CREATED = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _tag(name, color=None):
    return Tag(id=uuid.uuid4(), name=name, color=color, created_at=CREATED)


def _session(**overrides):
    values = dict(
        id=uuid.uuid4(),
        duration_seconds=90,
        description="Writing docs",
        created_at=CREATED,
        updated_at=CREATED,
        tags=[],
    )
    values.update(overrides)
    return WorkSessionWithTags(**values)


def test_format_duration_with_hours():
    assert format_duration(3661) == "1h 1m 1s"


def test_format_duration_minutes_only():
    assert format_duration(125) == "2m 5s"


@pytest.mark.parametrize("hours,minutes,secs", [(1, 0, 0), (2, 30, 15), (10, 59, 59)])
def test_format_duration_hour_form(hours, minutes, secs):
    total = hours * 3600 + minutes * 60 + secs
    assert format_duration(total) == f"{hours}h {minutes}m {secs}s"


@pytest.mark.parametrize("secs", [0, 1, 59])
def test_format_duration_seconds_form(secs):
    assert format_duration(secs) == f"{secs}s"


def test_layout_wraps_body_with_navigation():
    page = render_layout("<p>body-marker</p>")
    assert "<p>body-marker</p>" in page
    assert "Work Session Tracker" in page
    assert 'href="/sessions"' in page
    assert 'href="/tags"' in page
    assert page.index("<nav") < page.index("body-marker")


def test_render_error_escapes_message():
    html = render_error("bad <thing>")
    assert "Error: bad &lt;thing&gt;" in html
    assert "<thing>" not in html


def test_render_home_links():
    html = render_home()
    assert "Start Session" in html
    assert "Manage Tags" in html
    assert "Your recent work sessions will appear here" in html
    assert 'href="/tags"' in html


def test_detail_loading_when_no_session():
    assert "Loading session..." in render_session_detail(None)


def test_detail_error_takes_precedence():
    html = render_session_detail(_session(), "Invalid session ID")
    assert "Error: Invalid session ID" in html
    assert "Session Details" not in html


def test_detail_shows_fields():
    html = render_session_detail(_session(duration_seconds=3661))
    assert format_duration(3661) in html
    assert "Writing docs" in html
    assert "No tags" in html
    assert "2024-01-02 03:04:05 UTC" in html


def test_detail_missing_description():
    assert "No description" in render_session_detail(_session(description=None))


def test_detail_escapes_description():
    html = render_session_detail(_session(description="<b>x</b>"))
    assert "&lt;b&gt;x&lt;/b&gt;" in html
    assert "<b>x</b>" not in html


def test_detail_tags_with_and_without_colour():
    html = render_session_detail(_session(tags=[_tag("alpha", "#ff0000"), _tag("beta")]))
    assert "alpha" in html and "beta" in html
    assert "background-color: #ff0000" in html
    assert html.count("background-color") == 1
    assert "No tags" not in html


def test_detail_timestamps_converted_to_utc():
    shifted = CREATED.astimezone(timezone(timedelta(hours=2)))
    utc_html = render_session_detail(_session(created_at=CREATED, updated_at=CREATED))
    shifted_html = render_session_detail(_session(created_at=shifted, updated_at=shifted))
    assert utc_html == shifted_html or (
        utc_html.split("Duration")[1] == shifted_html.split("Duration")[1]
    )