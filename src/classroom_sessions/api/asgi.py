"""ASGI entrypoint for the classroom sessions API."""

from classroom_sessions.api.app import create_app
from classroom_sessions.containers import build_container

app = create_app(build_container())
