"""Core module for the chill application."""

from .types import Group, GroupIcon, Hangout, User

__all__ = ["Group", "GroupIcon", "Hangout", "User"]
