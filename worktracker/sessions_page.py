"""HTML for the sessions page and parsing of its new-session form."""

from __future__ import annotations

import re
import uuid
from collections.abc import Iterable, Mapping
from datetime import timezone
from html import escape
from typing import Any, Optional, Sequence, Union

from .models import CreateSessionRequest, Tag, WorkSessionWithTags
from .views import format_duration, render_error

SESSIONS_PATH = "/sessions"
FORM_FLAG = "form"

DURATION_FIELD = "duration_seconds"
DESCRIPTION_FIELD = "description"
TAGS_FIELD = "tag_ids"

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_INTEGER = re.compile(r"[+-]?[0-9]+")

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
_INPUT = (
    "mt-1 block w-full rounded-md border-gray-300 shadow-sm "
    "focus:border-indigo-500 focus:ring-indigo-500 sm:text-sm"
)
_HEADER_CELL = (
    "px-6 py-3 text-left text-xs font-medium text-gray-500 uppercase tracking-wider"
)
_COLUMNS = ("Duration", "Description", "Tags", "Created", "Actions")

FormFields = Union[Mapping[str, Any], Iterable[tuple[str, Any]]]


def _header() -> str:
    return (
        '<div class="sm:flex sm:items-center">'
        '<div class="sm:flex-auto">'
        '<h1 class="text-xl font-semibold text-gray-900">Work Sessions</h1>'
        '<p class="mt-2 text-sm text-gray-700">Track and manage your work sessions</p>'
        "</div>"
        '<div class="mt-4 sm:mt-0 sm:ml-16 sm:flex-none">'
        f'<form method="get" action="{SESSIONS_PATH}">'
        f'<input type="hidden" name="{FORM_FLAG}" value="1">'
        f'<button type="submit" class="{_PRIMARY_BUTTON}">Add Session</button>'
        "</form></div></div>"
    )


def _tag_checkbox(tag: Tag) -> str:
    return (
        '<label class="flex items-center">'
        '<input type="checkbox" class="h-4 w-4 text-indigo-600 focus:ring-indigo-500 '
        f'border-gray-300 rounded" name="{TAGS_FIELD}" value="{escape(str(tag.id))}">'
        f'<span class="ml-2 text-sm text-gray-700">{escape(tag.name)}</span>'
        "</label>"
    )


def _form(available_tags: Sequence[Tag]) -> str:
    checkboxes = "".join(_tag_checkbox(tag) for tag in available_tags)
    return (
        '<div class="mt-8 bg-white shadow sm:rounded-lg"><div class="px-4 py-5 sm:p-6">'
        '<h3 class="text-lg leading-6 font-medium text-gray-900">Create New Session</h3>'
        f'<form method="post" action="{SESSIONS_PATH}">'
        '<div class="mt-6 grid grid-cols-1 gap-y-6 gap-x-4 sm:grid-cols-6">'
        '<div class="sm:col-span-3">'
        '<label class="block text-sm font-medium text-gray-700">Duration (seconds)</label>'
        f'<input type="number" class="{_INPUT}" name="{DURATION_FIELD}" value="0">'
        "</div>"
        '<div class="sm:col-span-6">'
        '<label class="block text-sm font-medium text-gray-700">Description</label>'
        f'<textarea class="{_INPUT}" rows="3" name="{DESCRIPTION_FIELD}"></textarea>'
        "</div>"
        '<div class="sm:col-span-6">'
        '<label class="block text-sm font-medium text-gray-700">Tags</label>'
        f'<div class="mt-2 space-y-2">{checkboxes}</div>'
        "</div></div>"
        '<div class="mt-5 sm:mt-6 sm:grid sm:grid-cols-2 sm:gap-3 sm:grid-flow-row-dense">'
        f'<button type="submit" class="{_SUBMIT_BUTTON}">Create Session</button>'
        f'<a href="{SESSIONS_PATH}" class="{_CANCEL_BUTTON}">Cancel</a>'
        "</div></form></div></div>"
    )


def _session_row(session: WorkSessionWithTags) -> str:
    description = session.description if session.description is not None else "No description"
    chips = "".join(
        '<span class="inline-flex items-center px-2 py-1 rounded-full text-xs '
        f'font-medium bg-blue-100 text-blue-800">{escape(tag.name)}</span>'
        for tag in session.tags
    )
    created = session.created_at.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M")
    cell = '<td class="px-6 py-4 whitespace-nowrap text-sm text-gray-500">'
    return (
        "<tr>"
        '<td class="px-6 py-4 whitespace-nowrap text-sm font-medium text-gray-900">'
        f"{escape(format_duration(session.duration_seconds))}</td>"
        f"{cell}{escape(description)}</td>"
        f'{cell}<div class="flex flex-wrap gap-1">{chips}</div></td>'
        f"{cell}{escape(created)}</td>"
        f'{cell}<form method="post" action="{SESSIONS_PATH}/{escape(str(session.id))}/delete">'
        '<button type="submit" class="text-red-600 hover:text-red-900">Delete</button>'
        "</form></td>"
        "</tr>"
    )


def _table(sessions: Sequence[WorkSessionWithTags]) -> str:
    headers = "".join(f'<th class="{_HEADER_CELL}">{name}</th>' for name in _COLUMNS)
    rows = "".join(_session_row(session) for session in sessions)
    return (
        '<table class="min-w-full divide-y divide-gray-300">'
        f'<thead class="bg-gray-50"><tr>{headers}</tr></thead>'
        f'<tbody class="bg-white divide-y divide-gray-200">{rows}</tbody>'
        "</table>"
    )


def render_sessions_page(
    sessions: Optional[Sequence[WorkSessionWithTags]],
    available_tags: Sequence[Tag] = (),
    show_form: bool = False,
    error: Optional[str] = None,
) -> str:
    """Content of the sessions page; sessions of None shows a loading notice."""
    if sessions is None and error is None:
        listing = (
            '<div class="bg-white px-4 py-8 text-center">'
            '<p class="text-sm text-gray-500">Loading sessions...</p></div>'
        )
    elif error is not None:
        listing = render_error(error)
    else:
        listing = _table(sessions)
    form = _form(available_tags) if show_form else ""
    return (
        '<div class="px-4 py-6 sm:px-0">'
        + _header()
        + form
        + '<div class="mt-8 flex flex-col">'
        '<div class="-my-2 -mx-4 overflow-x-auto sm:-mx-6 lg:-mx-8">'
        '<div class="inline-block min-w-full py-2 align-middle md:px-6 lg:px-8">'
        '<div class="overflow-hidden shadow ring-1 ring-black ring-opacity-5 md:rounded-lg">'
        + listing
        + "</div></div></div></div></div>"
    )


def _pairs(fields: FormFields) -> Iterable[tuple[str, str]]:
    items = fields.items() if isinstance(fields, Mapping) else fields
    for name, value in items:
        if isinstance(value, (list, tuple)):
            for item in value:
                yield name, str(item)
        elif value is not None:
            yield name, str(value)


def _parse_duration(text: str) -> Optional[int]:
    if not _INTEGER.fullmatch(text):
        return None
    value = int(text)
    return value if _I32_MIN <= value <= _I32_MAX else None


def parse_session_form(fields: FormFields) -> CreateSessionRequest:
    """Turn submitted form fields into a request to create a session.

    A duration that is missing or not a 32-bit integer counts as 0, an empty
    description as none, and tag ids keep the order they were given in.
    Raises ValueError for a tag id that is not a UUID.
    """
    duration = 0
    description = ""
    tag_ids: list[uuid.UUID] = []
    for name, value in _pairs(fields):
        if name == DURATION_FIELD:
            parsed = _parse_duration(value)
            if parsed is not None:
                duration = parsed
        elif name == DESCRIPTION_FIELD:
            description = value
        elif name == TAGS_FIELD:
            try:
                tag_id = uuid.UUID(value)
            except ValueError as exc:
                raise ValueError(f"invalid tag id: {value!r}") from exc
            if tag_id not in tag_ids:
                tag_ids.append(tag_id)
    return CreateSessionRequest(
        duration_seconds=duration,
        description=description or None,
        tag_ids=tag_ids,
    )