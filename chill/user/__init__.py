"""User profile operations issued on behalf of a user."""
