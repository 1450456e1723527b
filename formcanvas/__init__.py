"""Drag-and-drop tree editing engine for visual form builders."""

__version__ = "0.1.0"
