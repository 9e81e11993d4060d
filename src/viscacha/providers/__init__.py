"""Resolver implementations."""

from .gopher_resolver import GopherResolver

__all__ = ["GopherResolver"]
