"""Display implementations."""

from .curses_display import CursesDisplay

__all__ = ["CursesDisplay"]
