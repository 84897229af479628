"""CLI package: dashboard poller and device simulator for the telemetry service."""

from importlib import import_module
from types import ModuleType


def __getattr__(name: str) -> ModuleType:
    if name == "app":
        return import_module("cli.app")
    raise AttributeError(name)

# ``cli.app`` stays a module path rather than the Typer instance so tests can
# monkeypatch ``cli.app.ApiClient``.

__all__ = []
