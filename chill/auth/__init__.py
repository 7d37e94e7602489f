"""Identify the caller of a request from a Firebase ID token."""

from .decorators import identify_caller

__all__ = ["identify_caller"]
