"""Registry — реестр creator → token."""

from .token_registry import TokenRegistry

__all__ = ["TokenRegistry"]
