"""Serverless entrypoint; the deployment installs ``move-inventory`` first."""

from move_inventory.api.asgi import app

__all__ = ["app"]
