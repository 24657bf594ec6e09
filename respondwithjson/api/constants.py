"""API-related constants."""

# Envelope messages
SUCCESS_MESSAGE = "Success"
ERROR_MESSAGE = "ERROR"

# HTTP Headers
JSON_MEDIA_TYPE = "application/json"

# Body terminator written after every JSON document
JSON_LINE_TERMINATOR = b"\n"
