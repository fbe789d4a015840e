"""HTTP-level helpers reused by every app's API layer."""
