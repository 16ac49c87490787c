"""Admin sign-in and session lifecycle service."""
