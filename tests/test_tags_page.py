import uuid
from datetime import datetime, timezone

from worktracker.models import CreateTagRequest, Tag, UpdateTagRequest
from worktracker.tags_page import (
    parse_create_tag_form,
    parse_update_tag_form,
    render_tags_page,
)


def _tag(name="work", color="#ff0000"):
    return Tag(
        id=uuid.uuid4(),
        name=name,
        color=color,
        created_at=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
    )


def test_loading_notice_when_tags_unknown():
    html = render_tags_page(None)
    assert "Loading tags..." in html


def test_empty_list_message():
    html = render_tags_page([])
    assert "No tags yet. Create your first tag!" in html
    assert "<ul" not in html


def test_error_replaces_listing():
    html = render_tags_page([_tag()], error="boom")
    assert "Error: boom" in html
    assert "work" not in html.split("Error: boom", 1)[1]


def test_listing_shows_names_dates_and_actions():
    tag = _tag()
    html = render_tags_page([tag])
    assert "work" in html
    assert "Created: 2024-01-02 03:04" in html
    assert f"/tags/{tag.id}/delete" in html
    assert f"edit={tag.id}" in html


def test_colour_swatch_and_plain_swatch():
    coloured = render_tags_page([_tag(color="#00ff00")])
    plain = render_tags_page([_tag(color=None)])
    assert "background-color: #00ff00" in coloured
    assert "background-color" not in plain
    assert "bg-gray-200" in plain


def test_names_are_escaped():
    html = render_tags_page([_tag(name="<b>")])
    assert "<b>" not in html
    assert "&lt;b&gt;" in html


def test_form_hidden_by_default():
    html = render_tags_page([])
    assert "Create New Tag" not in html
    assert "Edit Tag" not in html


def test_create_form():
    html = render_tags_page([], show_form=True)
    assert "Create New Tag" in html
    assert "Create Tag" in html
    assert "Update Tag" not in html


def test_edit_form_is_prefilled():
    tag = _tag(name="focus", color="#123456")
    html = render_tags_page([tag], editing_tag=tag, show_form=True)
    assert "Edit Tag" in html
    assert "Update Tag" in html
    assert 'value="focus"' in html
    assert 'value="#123456"' in html
    assert f'action="/tags/{tag.id}"' in html


def test_edit_form_without_colour_has_empty_value():
    tag = _tag(color=None)
    html = render_tags_page([tag], editing_tag=tag, show_form=True)
    assert 'name="color" value=""' in html


def test_parse_create_form():
    req = parse_create_tag_form({"name": "work", "color": "#abcdef"})
    assert req == CreateTagRequest(name="work", color="#abcdef")


def test_parse_create_form_empty_colour_is_none():
    req = parse_create_tag_form([("name", "work"), ("color", "")])
    assert req == CreateTagRequest(name="work", color=None)


def test_parse_create_form_missing_name_is_empty():
    assert parse_create_tag_form({}) == CreateTagRequest(name="", color=None)


def test_parse_update_form_empty_fields_are_none():
    assert parse_update_tag_form({"name": "", "color": ""}) == UpdateTagRequest()


def test_parse_update_form_values():
    req = parse_update_tag_form({"name": "deep", "color": ["#111111"]})
    assert req == UpdateTagRequest(name="deep", color="#111111")


def test_form_values_round_trip_through_parse():
    tag = _tag(name="review", color="#0a0b0c")
    req = parse_update_tag_form({"name": tag.name, "color": tag.color})
    assert (req.name, req.color) == (tag.name, tag.color)