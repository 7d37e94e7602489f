"""Hangout operations issued on behalf of a user."""
