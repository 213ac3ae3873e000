# worktracker

A small tracker for work sessions. Each session records how long you worked,
in seconds, and optionally what you did. Sessions can be labelled with tags,
and each tag can have a colour.

The package has three parts:

- a JSON API server that keeps sessions and tags in an SQLite database
  (`worktracker.app`, `worktracker.handlers`, `worktracker.db`);
- a web front end that talks to the API to list, create and delete sessions
  and to create, edit and delete tags (`worktracker.frontend`);
- an asynchronous Python client for the API (`worktracker.client`).

## Installation

Install the package with your usual Python package installer. Python 3.10 or
later is required. The extra named `test` pulls in what the test suite needs.

## Running the API server

    worktracker-server [--database PATH] [--host HOST] [--port PORT]

By default the server listens on `0.0.0.0`, port 8080. The database file is
taken from `--database`. Without that option it comes from the `DATABASE_URL`
environment variable, which may be a plain path or a `sqlite:///` URL. If the
variable is not set either, the file is `work_tracker.db` in the working
directory. A `.env` file in the working directory is read first if there is
one. The tables are created when the database is opened.

Routes:

| Method | Path                 | Action                          |
|--------|----------------------|---------------------------------|
| GET    | `/api/sessions`      | list sessions, newest first     |
| POST   | `/api/sessions`      | create a session                |
| GET    | `/api/sessions/{id}` | fetch one session with its tags |
| PUT    | `/api/sessions/{id}` | update a session                |
| DELETE | `/api/sessions/{id}` | delete a session                |
| GET    | `/api/tags`          | list tags, sorted by name       |
| POST   | `/api/tags`          | create a tag                    |
| GET    | `/api/tags/{id}`     | fetch one tag                   |
| PUT    | `/api/tags/{id}`     | update a tag                    |
| DELETE | `/api/tags/{id}`     | delete a tag                    |

Every successful reply comes in the same envelope:

```json
{"success": true, "data": {...}, "message": null}
```

Failed requests return a bare status code:

| Status | When                                                      |
|--------|-----------------------------------------------------------|
| `400`  | the id in the path is not a UUID, or the body is not JSON |
| `404`  | no session or tag has that id                             |
| `415`  | the request body is not sent as `application/json`        |
| `422`  | the body is missing fields or has fields of the wrong type |
| `500`  | the database operation failed                             |

CORS allows `GET`, `POST`, `PUT` and `DELETE` from any origin, with any
headers.

To serve the API from your own code, pass an open `Database` to
`worktracker.app.create_app(database)`. It returns a Starlette application.

## Running the web front end

    worktracker-web [--api-base URL] [--host HOST] [--port PORT]

By default the front end listens on `127.0.0.1`, port 8000, and uses the API
at `http://localhost:8080/api`. The API server must be running. Pages:

- `/`: the home page;
- `/sessions`: the session list. `/sessions?form=1` adds the form for a new
  session, where the duration is entered in seconds and tags are chosen with
  check boxes;
- `/sessions/{id}`: the details of one session;
- `/tags`: the tag list. `/tags?form=1` adds the form for a new tag, and
  `/tags?edit={id}` opens the form for editing a tag.

Durations are shown in short form: `45s`, `2m 5s`, `1h 0m 0s`
(see `worktracker.views.format_duration`).

`worktracker.frontend.create_frontend(client)` builds the same application
around an `ApiClient` of your choosing.

## Using the library

The storage layer can be used on its own:

```python
from worktracker.db import Database
from worktracker.models import CreateSessionRequest, CreateTagRequest

with Database("tracker.db") as db:
    tag = db.create_tag(CreateTagRequest(name="writing", color="#3366ff"))
    session = db.create_session(
        CreateSessionRequest(
            duration_seconds=1800,
            description="Drafted the report",
            tag_ids=[tag.id],
        )
    )
    for entry in db.get_sessions():
        print(entry.duration_seconds, [t.name for t in entry.tags])
```

`Database(":memory:")` keeps everything in memory. The `get_*` and `update_*`
methods return `None` for an unknown id. The `delete_*` methods return
whether something was deleted.

Update requests only change the fields you give. If you leave `tag_ids` out
of an `UpdateSessionRequest`, the session keeps its tags; an empty list
removes them all. Deleting a tag also removes it from every session.

The API client is asynchronous. It raises `ApiError` when a request cannot
be sent, when the reply has an error status, or when the reply cannot be
parsed:

```python
import asyncio

from worktracker.client import ApiClient, ApiError


async def show() -> None:
    async with ApiClient("http://localhost:8080/api") as client:
        try:
            for tag in await client.get_tags():
                print(tag.name, tag.color)
        except ApiError as exc:
            print("request failed:", exc)


asyncio.run(show())
```

`ApiClient` has `get_sessions`, `get_session`, `create_session`,
`update_session`, `delete_session`, `get_tags`, `create_tag`, `update_tag`
and `delete_tag`. It has no method to fetch a single tag. To route its
requests through an `httpx` transport, pass one as `transport`.

Every model in `worktracker.models` converts to and from plain JSON data with
`to_dict()` and `from_dict()`. Identifiers are UUIDs, timestamps are UTC, and
`from_dict()` raises `ValueError` on malformed input. For
`ApiResponse.from_dict(data, parse)`, `parse` is a function that converts the
`data` member.

## What it does not do

- There is no running timer. Durations are entered by hand, as a number of
  seconds.
- Sessions cannot be edited from the web front end. Use the API or the
  client for that.
- There are no user accounts and no authentication. Anyone who can reach the
  server can read and change everything.