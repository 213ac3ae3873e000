"""HTML for the tags page and parsing of its tag form."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import timezone
from html import escape
from typing import Any, Optional, Sequence, Union

from .models import CreateTagRequest, Tag, UpdateTagRequest
from .views import render_error

TAGS_PATH = "/tags"
FORM_FLAG = "form"
EDIT_FLAG = "edit"

NAME_FIELD = "name"
COLOR_FIELD = "color"

_PRIMARY_BUTTON = (
    "inline-flex items-center justify-center rounded-md border border-transparent "
    "bg-indigo-600 px-4 py-2 text-sm font-medium text-white shadow-sm "
    "hover:bg-indigo-700 focus:outline-none focus:ring-2 focus:ring-indigo-500 "
    "focus:ring-offset-2 sm:w-auto"
)
_SUBMIT_BUTTON = (
    "w-full inline-flex justify-center rounded-md border border-transparent shadow-sm "
    "px-4 py-2 bg-indigo-600 text-base font-medium text-white hover:bg-indigo-700 "
    "focus:outline-none focus:ring-2 focus:ring-offset-2 focus:ring-indigo-500 "
    "sm:col-start-2 sm:text-sm"
)
_CANCEL_BUTTON = (
    "mt-3 w-full inline-flex justify-center rounded-md border border-gray-300 shadow-sm "
    "px-4 py-2 bg-white text-base font-medium text-gray-700 hover:bg-gray-50 "
    "focus:outline-none focus:ring-2 focus:ring-offset-2 focus:ring-indigo-500 "
    "sm:mt-0 sm:col-start-1 sm:text-sm"
)
_TEXT_INPUT = (
    "mt-1 block w-full rounded-md border-gray-300 shadow-sm "
    "focus:border-indigo-500 focus:ring-indigo-500 sm:text-sm"
)
_COLOR_INPUT = (
    "mt-1 block w-full h-10 rounded-md border-gray-300 shadow-sm "
    "focus:border-indigo-500 focus:ring-indigo-500"
)

FormFields = Union[Mapping[str, Any], Iterable[tuple[str, Any]]]


def _header() -> str:
    return (
        '<div class="sm:flex sm:items-center">'
        '<div class="sm:flex-auto">'
        '<h1 class="text-xl font-semibold text-gray-900">Tags</h1>'
        '<p class="mt-2 text-sm text-gray-700">Manage your session tags</p>'
        "</div>"
        '<div class="mt-4 sm:mt-0 sm:ml-16 sm:flex-none">'
        f'<form method="get" action="{TAGS_PATH}">'
        f'<input type="hidden" name="{FORM_FLAG}" value="1">'
        f'<button type="submit" class="{_PRIMARY_BUTTON}">Add Tag</button>'
        "</form></div></div>"
    )


def _form(editing_tag: Optional[Tag]) -> str:
    if editing_tag is not None:
        title = "Edit Tag"
        submit = "Update Tag"
        action = f"{TAGS_PATH}/{escape(str(editing_tag.id))}"
        name = editing_tag.name
        color = editing_tag.color or ""
    else:
        title = "Create New Tag"
        submit = "Create Tag"
        action = TAGS_PATH
        name = ""
        color = ""
    return (
        '<div class="mt-8 bg-white shadow sm:rounded-lg"><div class="px-4 py-5 sm:p-6">'
        f'<h3 class="text-lg leading-6 font-medium text-gray-900">{title}</h3>'
        f'<form method="post" action="{action}">'
        '<div class="mt-6 grid grid-cols-1 gap-y-6 gap-x-4 sm:grid-cols-6">'
        '<div class="sm:col-span-4">'
        '<label class="block text-sm font-medium text-gray-700">Name</label>'
        f'<input type="text" class="{_TEXT_INPUT}" name="{NAME_FIELD}" value="{escape(name)}">'
        "</div>"
        '<div class="sm:col-span-2">'
        '<label class="block text-sm font-medium text-gray-700">Color</label>'
        f'<input type="color" class="{_COLOR_INPUT}" name="{COLOR_FIELD}" '
        f'value="{escape(color)}">'
        "</div></div>"
        '<div class="mt-5 sm:mt-6 sm:grid sm:grid-cols-2 sm:gap-3 sm:grid-flow-row-dense">'
        f'<button type="submit" class="{_SUBMIT_BUTTON}">{submit}</button>'
        f'<a href="{TAGS_PATH}" class="{_CANCEL_BUTTON}">Cancel</a>'
        "</div></form></div></div>"
    )


def _swatch(tag: Tag) -> str:
    if tag.color is not None:
        style = escape(f"background-color: {tag.color}")
        return (
            '<div class="h-4 w-4 rounded-full mr-3 border border-gray-300" '
            f'style="{style}"></div>'
        )
    return '<div class="h-4 w-4 rounded-full mr-3 bg-gray-200 border border-gray-300"></div>'


def _tag_item(tag: Tag) -> str:
    tag_id = escape(str(tag.id))
    created = tag.created_at.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M")
    return (
        '<li class="px-6 py-4"><div class="flex items-center justify-between">'
        '<div class="flex items-center">'
        + _swatch(tag)
        + "<div>"
        f'<p class="text-sm font-medium text-gray-900">{escape(tag.name)}</p>'
        f'<p class="text-sm text-gray-500">Created: {escape(created)}</p>'
        "</div></div>"
        '<div class="flex items-center space-x-2">'
        f'<a href="{TAGS_PATH}?{EDIT_FLAG}={tag_id}" '
        'class="text-indigo-600 hover:text-indigo-900 text-sm">Edit</a>'
        f'<form method="post" action="{TAGS_PATH}/{tag_id}/delete">'
        '<button type="submit" class="text-red-600 hover:text-red-900 text-sm">Delete</button>'
        "</form></div></div></li>"
    )


def _listing(tags: Optional[Sequence[Tag]], error: Optional[str]) -> str:
    if error is not None:
        return render_error(error)
    if tags is None:
        return (
            '<div class="bg-white px-4 py-8 text-center rounded-lg shadow">'
            '<p class="text-sm text-gray-500">Loading tags...</p></div>'
        )
    if not tags:
        return (
            '<div class="bg-white px-4 py-8 text-center rounded-lg shadow">'
            '<p class="text-sm text-gray-500">No tags yet. Create your first tag!</p></div>'
        )
    items = "".join(_tag_item(tag) for tag in tags)
    return (
        '<div class="bg-white shadow overflow-hidden sm:rounded-md">'
        f'<ul class="divide-y divide-gray-200">{items}</ul></div>'
    )


def render_tags_page(
    tags: Optional[Sequence[Tag]],
    editing_tag: Optional[Tag] = None,
    show_form: bool = False,
    error: Optional[str] = None,
) -> str:
    """Content of the tags page; tags of None shows a loading notice.

    When show_form is set the form edits editing_tag, or creates a new tag
    if there is none.
    """
    form = _form(editing_tag) if show_form else ""
    return (
        '<div class="px-4 py-6 sm:px-0">'
        + _header()
        + form
        + '<div class="mt-8">'
        + _listing(tags, error)
        + "</div></div>"
    )


def _values(fields: FormFields) -> dict[str, str]:
    items = fields.items() if isinstance(fields, Mapping) else fields
    values: dict[str, str] = {}
    for name, value in items:
        if isinstance(value, (list, tuple)):
            if value:
                values[name] = str(value[-1])
        elif value is not None:
            values[name] = str(value)
    return values


def parse_create_tag_form(fields: FormFields) -> CreateTagRequest:
    """Turn submitted form fields into a request to create a tag.

    A missing name counts as empty; an empty colour counts as none.
    """
    values = _values(fields)
    color = values.get(COLOR_FIELD, "")
    return CreateTagRequest(name=values.get(NAME_FIELD, ""), color=color or None)


def parse_update_tag_form(fields: FormFields) -> UpdateTagRequest:
    """Turn submitted form fields into a request to change a tag.

    An empty or missing name or colour leaves that field as it is.
    """
    values = _values(fields)
    return UpdateTagRequest(
        name=values.get(NAME_FIELD) or None,
        color=values.get(COLOR_FIELD) or None,
    )