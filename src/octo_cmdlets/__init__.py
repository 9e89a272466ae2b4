"""Scriptable resource management for Octopus Deploy servers."""

__version__ = "0.1.0"
