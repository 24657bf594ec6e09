"""HTTP layer built on FastAPI.

- **schemas**: The response envelope model
- **utils**: Envelope-aware orjson response class
- **writer**: Response builders and ASGI stream writers
- **decoding**: Strict JSON request decoding
- **middleware**: Exception handlers answering in the envelope format
- **main**: Application factory
"""
