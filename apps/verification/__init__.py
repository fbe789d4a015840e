"""Verification app package: identity documents and their review."""
