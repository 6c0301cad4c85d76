"""Test doubles shared across test modules."""
from __future__ import annotations


class GrpcError(Exception):
    """Stand-in for an upstream error carrying a gRPC status code."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
