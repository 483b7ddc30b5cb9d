"""ASGI entrypoint for the smart pantry API."""

from smart_pantry.api.app import create_app
from smart_pantry.containers import build_container

app = create_app(build_container())
