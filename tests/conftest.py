"""Shared fixtures for the MiLight bridge tests."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from utils.milight import MemoryTransceiver, MiLightClient


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    import app as app_module
    from routes import register_blueprints

    app_module.app.config['TESTING'] = True

    if 'milight' not in app_module.app.blueprints:
        register_blueprints(app_module.app)

    return app_module.app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def transceiver():
    return MemoryTransceiver()


@pytest.fixture
def milight_client(transceiver):
    """A MiLightClient on an in-memory radio with a baseline of 10 repeats."""
    return MiLightClient(transceiver, resend_count=10)


@pytest.fixture
def patched_client(milight_client):
    """Route handlers and /health use the in-memory client."""
    with patch('routes.milight.get_milight_client', return_value=milight_client), \
         patch('app.get_milight_client', return_value=milight_client):
        yield milight_client
