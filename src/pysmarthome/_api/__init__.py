"""Endpoint modules for the smart-home REST API (internal)."""
