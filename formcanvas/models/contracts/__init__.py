"""Pydantic contracts for component trees, drag payloads and actions."""
