"""Group operations issued on behalf of a user."""
