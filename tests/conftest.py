"""Test configuration and fixtures for the Product API."""

import os

# Must be set before the configuration is loaded on first import
os.environ.setdefault("APP_ENVIRONMENT", "test")

from tests.fixtures import *  # noqa: E402,F401,F403
