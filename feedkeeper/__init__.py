"""
feedkeeper

A personal feed reader backend: subscribes to RSS, Atom and JSON feeds,
stores their entries in SQLite and tracks per-entry read state.
"""

__version__ = "1.0.0"
