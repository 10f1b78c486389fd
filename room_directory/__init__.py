# room_directory/__init__.py
"""Room directory lookup service."""

__version__ = "1.0.0"
