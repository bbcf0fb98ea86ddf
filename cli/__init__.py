"""CLI package for interacting with the air quality summary service."""

from importlib import import_module
from types import ModuleType


def __getattr__(name: str) -> ModuleType:
    if name == "app":
        return import_module("cli.app")
    raise AttributeError(name)

# The Typer instance stays on ``cli.app.app`` so tests can patch attributes on
# the ``cli.app`` module.

__all__ = []
