"""
Persistence failures raised by the repositories.
"""

from __future__ import annotations


class StoreError(Exception):
    """Any failure talking to the database."""


class EmailAlreadyRegistered(StoreError):
    """The ``users.email`` unique constraint rejected an insert."""

    def __init__(self, email: str) -> None:
        super().__init__(f"UNIQUE constraint failed: users.email ({email})")
        self.email = email
