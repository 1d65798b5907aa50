from __future__ import annotations


class InvalidArgument(ValueError):
    """Raised synchronously, before any hashing starts, when an argument cannot be used."""
