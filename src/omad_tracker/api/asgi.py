"""ASGI entrypoint for the OMAD tracker API."""

from omad_tracker.api.app import create_app
from omad_tracker.containers import build_container

app = create_app(build_container())
