"""HTML for the page layout, the home page and a single session's details."""

from __future__ import annotations

from datetime import datetime, timezone
from html import escape
from typing import Optional

from .models import Tag, WorkSessionWithTags

TITLE = "Work Session Tracker"

_NAV_ACTIVE = (
    "border-indigo-500 text-gray-900 inline-flex items-center px-1 pt-1 "
    "border-b-2 text-sm font-medium"
)
_NAV_INACTIVE = (
    "border-transparent text-gray-500 hover:border-gray-300 hover:text-gray-700 "
    "inline-flex items-center px-1 pt-1 border-b-2 text-sm font-medium"
)
_NAV_LINKS = (("/", "Home", _NAV_ACTIVE), ("/sessions", "Sessions", _NAV_INACTIVE),
              ("/tags", "Tags", _NAV_INACTIVE))

_BUTTON = (
    "inline-flex items-center px-4 py-2 border border-transparent text-sm font-medium "
    "rounded-md shadow-sm text-white bg-{0}-600 hover:bg-{0}-700 focus:outline-none "
    "focus:ring-2 focus:ring-offset-2 focus:ring-{0}-500"
)


def _trunc_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return quotient if value >= 0 else -quotient


def _trunc_rem(value: int, divisor: int) -> int:
    return value - divisor * _trunc_div(value, divisor)


def format_duration(seconds: int) -> str:
    """Render a number of seconds as "1h 2m 3s", "2m 3s" or "3s"."""
    hours = _trunc_div(seconds, 3600)
    minutes = _trunc_div(_trunc_rem(seconds, 3600), 60)
    secs = _trunc_rem(seconds, 60)
    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def _timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def render_layout(body: str) -> str:
    """Wrap page content in the full document with the navigation bar."""
    links = "".join(
        f'<a href="{href}" class="{classes}">{escape(label)}</a>'
        for href, label, classes in _NAV_LINKS
    )
    return (
        "<!DOCTYPE html>"
        '<html><head><meta charset="utf-8">'
        f"<title>{TITLE}</title></head>"
        '<body><div class="min-h-screen bg-gray-50">'
        '<nav class="bg-white shadow-sm">'
        '<div class="max-w-7xl mx-auto px-4 sm:px-6 lg:px-8">'
        '<div class="flex justify-between h-16"><div class="flex">'
        '<div class="flex-shrink-0 flex items-center">'
        f'<h1 class="text-xl font-semibold text-gray-900">{TITLE}</h1></div>'
        f'<div class="hidden sm:ml-6 sm:flex sm:space-x-8">{links}</div>'
        "</div></div></div></nav>"
        f'<main class="max-w-7xl mx-auto py-6 sm:px-6 lg:px-8">{body}</main>'
        "</div></body></html>"
    )


def render_error(message: str) -> str:
    """The red box that reports a failure."""
    return (
        '<div class="bg-red-50 border border-red-200 rounded-md p-4">'
        f'<p class="text-sm text-red-600">Error: {escape(message)}</p></div>'
    )


def _card(title: str, text: str, href: str, label: str, colour: str) -> str:
    return (
        '<div class="bg-white overflow-hidden shadow rounded-lg">'
        '<div class="px-4 py-5 sm:p-6">'
        f'<h3 class="text-lg leading-6 font-medium text-gray-900">{title}</h3>'
        f'<div class="mt-2 max-w-xl text-sm text-gray-500"><p>{text}</p></div>'
        f'<div class="mt-5"><a href="{href}" class="{_BUTTON.format(colour)}">{label}</a></div>'
        "</div></div>"
    )


def render_home() -> str:
    """Content of the home page."""
    return (
        '<div class="px-4 py-6 sm:px-0"><div class="text-center">'
        f'<h1 class="text-3xl font-bold text-gray-900 mb-8">{TITLE}</h1>'
        '<p class="text-lg text-gray-600 mb-8">'
        "Track your work sessions, add descriptions, and organize with tags</p>"
        '<div class="grid grid-cols-1 md:grid-cols-2 gap-6 max-w-4xl mx-auto">'
        + _card("Current Session", "Start tracking your work session now",
                "/sessions", "Start Session", "indigo")
        + _card("Manage Tags", "Create and organize your session tags",
                "/tags", "Manage Tags", "green")
        + "</div>"
        '<div class="mt-12">'
        '<h2 class="text-2xl font-bold text-gray-900 mb-4">Recent Sessions</h2>'
        '<div class="bg-white shadow overflow-hidden sm:rounded-md">'
        '<div class="px-4 py-5 sm:px-6">'
        '<p class="text-sm text-gray-600">Your recent work sessions will appear here</p>'
        '<div class="mt-4"><a href="/sessions" class="text-indigo-600 hover:text-indigo-900">'
        "View all sessions \u2192</a></div>"
        "</div></div></div></div></div>"
    )


def _tag_chip(tag: Tag) -> str:
    dot = ""
    if tag.color is not None:
        dot = (
            '<div class="h-2 w-2 rounded-full mr-2" '
            f'style="{escape(f"background-color: {tag.color}")}"></div>'
        )
    return (
        '<span class="inline-flex items-center px-3 py-1 rounded-full text-sm '
        f'font-medium bg-blue-100 text-blue-800">{dot}{escape(tag.name)}</span>'
    )


def _row(index: int, label: str, value: str) -> str:
    shade = "bg-gray-50" if index % 2 == 0 else "bg-white"
    return (
        f'<div class="{shade} px-4 py-5 sm:grid sm:grid-cols-3 sm:gap-4 sm:px-6">'
        f'<dt class="text-sm font-medium text-gray-500">{label}</dt>'
        f'<dd class="mt-1 text-sm text-gray-900 sm:mt-0 sm:col-span-2">{value}</dd>'
        "</div>"
    )


def render_session_detail(
    session: Optional[WorkSessionWithTags], error: Optional[str] = None
) -> str:
    """Content of a session's page: its details, an error, or a loading notice."""
    if error is not None:
        inner = render_error(error)
    elif session is None:
        inner = (
            '<div class="bg-white px-4 py-8 text-center rounded-lg shadow">'
            '<p class="text-sm text-gray-500">Loading session...</p></div>'
        )
    else:
        if session.tags:
            tags = (
                '<div class="flex flex-wrap gap-2">'
                + "".join(_tag_chip(tag) for tag in session.tags)
                + "</div>"
            )
        else:
            tags = '<span class="text-gray-500">No tags</span>'
        description = session.description if session.description is not None else "No description"
        rows = [
            ("Duration", escape(format_duration(session.duration_seconds))),
            ("Description", escape(description)),
            ("Tags", tags),
            ("Created", escape(_timestamp(session.created_at))),
            ("Last Updated", escape(_timestamp(session.updated_at))),
        ]
        inner = (
            '<div class="bg-white shadow overflow-hidden sm:rounded-lg">'
            '<div class="px-4 py-5 sm:px-6">'
            '<h3 class="text-lg leading-6 font-medium text-gray-900">Session Details</h3>'
            '<p class="mt-1 max-w-2xl text-sm text-gray-500">'
            "Information about this work session</p></div>"
            '<div class="border-t border-gray-200"><dl>'
            + "".join(_row(i, label, value) for i, (label, value) in enumerate(rows))
            + "</dl></div></div>"
        )
    return f'<div class="px-4 py-6 sm:px-0">{inner}</div>'