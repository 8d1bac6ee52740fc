"""Tests for container wiring."""

import asyncio

from macro_tracker.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.ai_estimator is not None
    assert container.nutrition_resolver.ai_estimator is container.ai_estimator
    assert container.dashboard_service is not None
    asyncio.run(container.close_resources())


def test_build_container_without_openai_key(settings) -> None:
    settings = settings.model_copy(update={"openai_api_key": None})

    container = build_container(settings)

    assert container.ai_estimator is None
    assert container.nutrition_resolver.ai_estimator is None
    asyncio.run(container.close_resources())
