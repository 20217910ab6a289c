"""Persistence helpers for chembalance."""

from chembalance.persistence.sqlite_store import (
    connect,
    create_session,
    ensure_schema,
    find_session,
    list_balances,
    save_balance,
    session_for,
)

__all__ = [
    "connect",
    "create_session",
    "ensure_schema",
    "find_session",
    "list_balances",
    "save_balance",
    "session_for",
]
