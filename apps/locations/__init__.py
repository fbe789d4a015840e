"""Locations app package.

Master data describing where listings live: Colombian departments, their
cities and the universities or institutes students search around.
"""
