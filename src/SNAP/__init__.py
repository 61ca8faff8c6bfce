"""SNAP: school nutrition and agenda platform."""

__version__ = "0.1.0"
