"""Pydantic models describing the response wire format."""
