"""Pytest configuration and fixtures for Verso tests."""

from __future__ import annotations

import pytest

from verso import Environment, ParsingState, StandardVariableProvider
from verso.view_helper import ArgumentDefinitionCache


@pytest.fixture
def env() -> Environment:
    """Create an Environment with a private argument cache."""
    return Environment(argument_cache=ArgumentDefinitionCache())


@pytest.fixture
def state(env: Environment) -> ParsingState:
    """Create a ParsingState bound to ``env``."""
    return env.parsing_state()


@pytest.fixture
def rendering_context(env: Environment):
    """Create a standalone RenderingContext with a few variables."""
    return env.create_rendering_context({"user": {"name": "Ada"}, "count": 3})


@pytest.fixture
def provider() -> StandardVariableProvider:
    """Create a provider over nested data."""
    return StandardVariableProvider({"a": {"b": {"c": 42}}, "items": ["x", "y"]})


@pytest.fixture(params=["interpreted", "compiled"])
def mode(request) -> str:
    """Run a test once per rendering strategy."""
    return request.param
