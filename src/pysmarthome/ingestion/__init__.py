"""Ingestion layer.

This package contains adapters that turn server payloads (REST responses,
realtime pushes) into typed device records for the registry.
"""

__all__: list[str] = []
