"""Keystroke-driven launcher: input classification and fuzzy command matching."""

__version__ = "0.1.0"
