"""Favorites app package: listings bookmarked by users."""
