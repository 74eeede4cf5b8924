"""ASGI entrypoint for the room editor API."""

from room_editor.api.app import create_app
from room_editor.containers import build_container

app = create_app(build_container())
