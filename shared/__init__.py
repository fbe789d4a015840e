"""
Shared building blocks used across the apps: API exceptions and
infrastructure helpers such as encrypted model fields.
"""
