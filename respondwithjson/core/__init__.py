"""Core package for the framework-independent helpers.

- **config**: Application settings with environment support
- **exceptions**: Error hierarchy with machine-readable error codes
- **logging**: Loguru setup with console and JSON formatters
- **reflection**: Field-type introspection and JSON text serialization
- **types**: Type aliases for better code clarity
- **validation**: Non-empty checks for text and integer fields
"""
