"""
Test Configuration
==================

Pytest configuration with fixtures for settings, service providers and
pipeline components.
"""

import pytest
from unittest.mock import Mock

import static_render.config.settings as settings_module
from static_render.config.settings import Settings
from static_render.core.components.engine import create_environment
from static_render.core.rendering.component_renderer import ComponentRenderer
from static_render.core.rendering.orchestrator import RenderOrchestrator
from static_render.core.rendering.parameter_binder import ParameterBinder

from tests.utils.mocks import RecordingRendererFactory, RecordingServiceProvider, make_logger_factory


# Test settings override
class TestSettings(Settings):
    """Test-specific settings."""

    __test__ = False

    environment: str = "testing"
    debug: bool = True
    log_level: str = "DEBUG"
    dispatcher_thread_prefix: str = "test-dispatcher"


@pytest.fixture
def test_settings() -> TestSettings:
    """Test settings fixture."""
    return TestSettings()


@pytest.fixture(autouse=True)
def override_settings(test_settings: TestSettings):
    """Make get_settings() return the test settings."""
    previous = settings_module.settings
    settings_module.settings = test_settings
    yield test_settings
    settings_module.settings = previous


@pytest.fixture
def logger_factory():
    """Logger factory double."""
    factory, _ = make_logger_factory()
    return factory


@pytest.fixture
def mock_logger(logger_factory) -> Mock:
    """Bound logger handed out by the logger factory double."""
    return logger_factory.return_value.bind.return_value


@pytest.fixture
def services() -> RecordingServiceProvider:
    """Service provider recording the scopes it creates."""
    return RecordingServiceProvider()


@pytest.fixture
def binder(logger_factory) -> ParameterBinder:
    return ParameterBinder(logger_factory)


@pytest.fixture
def renderer(services, logger_factory, test_settings) -> ComponentRenderer:
    """Component renderer driving the real engine."""
    return ComponentRenderer(
        services,
        logger_factory=logger_factory,
        environment=create_environment(test_settings),
        settings=test_settings,
    )


@pytest.fixture
def renderer_factory() -> RecordingRendererFactory:
    """Engine double factory returning "<div>Hi</div>"."""
    return RecordingRendererFactory()


@pytest.fixture
def fake_renderer(services, logger_factory, test_settings, renderer_factory) -> ComponentRenderer:
    """Component renderer driving the engine double."""
    return ComponentRenderer(
        services,
        logger_factory=logger_factory,
        environment=create_environment(test_settings),
        renderer_factory=renderer_factory,
        settings=test_settings,
    )


@pytest.fixture
def orchestrator(renderer, binder, logger_factory) -> RenderOrchestrator:
    return RenderOrchestrator(renderer, binder, logger_factory)
