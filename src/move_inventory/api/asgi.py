"""ASGI entrypoint for the move inventory API."""

from move_inventory.api.app import create_app
from move_inventory.containers import build_container

app = create_app(build_container())
