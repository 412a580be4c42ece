"""Sibilant: translate the clipboard with a configurable backend."""

__version__ = "0.3.0"
