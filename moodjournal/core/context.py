#!/usr/bin/env python3
"""
context.py
--------------------
Collaborator interfaces consumed by the database layer.

- AuthContext: who the current user is (authentication itself lives elsewhere)
- Clock: what day it is, injectable for deterministic tests

Usage:
    auth = StaticAuthContext(user_id=1)
    clock = FixedClock(date(2026, 10, 19))
    db = JournalDB(db_path, auth=auth, clock=clock)
"""
from __future__ import annotations

from datetime import date
from typing import Optional, Protocol


class AuthContext(Protocol):
    """Interface for resolving the signed-in profile."""

    def current_user_id(self) -> Optional[int]:
        """Return the current user's id, or None when nobody is signed in."""
        ...

    @property
    def is_authenticated(self) -> bool:
        ...


class Clock(Protocol):
    """Interface for reading the current calendar day."""

    def today(self) -> date:
        ...


class StaticAuthContext:
    """AuthContext bound to a fixed user id (None means signed out)."""

    def __init__(self, user_id: Optional[int] = None) -> None:
        self._user_id = user_id

    def current_user_id(self) -> Optional[int]:
        return self._user_id

    @property
    def is_authenticated(self) -> bool:
        return self._user_id is not None

    def sign_in(self, user_id: int) -> None:
        self._user_id = user_id

    def sign_out(self) -> None:
        self._user_id = None


class SystemClock:
    """Clock backed by the local system date."""

    def today(self) -> date:
        return date.today()


class FixedClock:
    """Clock that always returns the same day."""

    def __init__(self, day: date) -> None:
        self.day = day

    def today(self) -> date:
        return self.day
