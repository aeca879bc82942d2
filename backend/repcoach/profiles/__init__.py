"""Exercise profile table and catalog."""

from repcoach.profiles.registry import ProfileRegistry, get_registry

__all__ = ["ProfileRegistry", "get_registry"]
