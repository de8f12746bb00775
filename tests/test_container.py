"""Tests for container wiring."""

import asyncio

from move_inventory.config import Settings
from move_inventory.containers import build_container


def test_build_container_creates_services(settings: Settings) -> None:
    container = build_container(settings)

    assert container.settings is settings
    assert container.photo_service.max_bytes == 10 * 1024 * 1024
    assert container.session_service.default_safety_factor == 0.2
    assert container.analysis_service.include_error_detail is False
    asyncio.run(container.close_resources())


def test_local_environment_exposes_error_detail(settings: Settings) -> None:
    local = settings.model_copy(update={"environment": "local"})

    container = build_container(local)

    assert container.analysis_service.include_error_detail is True
    asyncio.run(container.close_resources())
