"""Report domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ClientInfo:
    """Client details printed on an inventory report."""

    client_name: str
    city: str
    quote_id: str | None = None
