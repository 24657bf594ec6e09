"""Utility modules for API-specific functionality.

- **responses**: Envelope-aware JSON response class using orjson
"""
