"""Core helpers for wiring application components together."""

from .module_registry import API_MODULES, EVENT_MODULES, ModuleDefinition, connect_event_modules, register_modules

__all__ = [
    "API_MODULES",
    "EVENT_MODULES",
    "ModuleDefinition",
    "connect_event_modules",
    "register_modules",
]
