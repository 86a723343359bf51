"""Exceptions shared by the content store, sessions and HTTP layer.

Each error carries the HTTP status the web layer should answer with.
"""

from __future__ import annotations


class MinisnapError(Exception):
    """Base exception for minisnap operations."""

    status_code: int = 500

    def __init__(self, message: str, *, slug: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.slug = slug


class InvalidRenderer(MinisnapError):
    status_code = 400

    def __init__(self, renderer: str) -> None:
        super().__init__(f"unsupported renderer: {renderer}")
        self.renderer = renderer


class EntryNotFound(MinisnapError):
    status_code = 404

    def __init__(self, slug: str) -> None:
        super().__init__("entry not found", slug=slug)


class AllocationExhausted(MinisnapError):
    """Every generated slug collided with an existing entry."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"unable to allocate unique slug after {attempts} attempts")
        self.attempts = attempts


class UnsupportedRenderer(MinisnapError):
    def __init__(self, renderer: str) -> None:
        super().__init__(f"cannot render content with renderer: {renderer}")
        self.renderer = renderer


class PersistenceFailure(MinisnapError):
    """Wraps an I/O or decode failure while touching an entry record."""

    def __init__(self, operation: str, *, slug: str | None = None) -> None:
        super().__init__(f"{operation} failed", slug=slug)
        self.operation = operation


class AuthenticationFailure(MinisnapError):
    status_code = 200

    def __init__(self) -> None:
        super().__init__("Incorrect password")


class SessionInvalid(MinisnapError):
    status_code = 302

    def __init__(self, next_url: str) -> None:
        super().__init__("session missing or expired")
        self.next_url = next_url


class RandomnessUnavailable(MinisnapError):
    def __init__(self, purpose: str) -> None:
        super().__init__(f"secure random source unavailable ({purpose})")
        self.purpose = purpose
