"""Document paths used by the repositories (one place, so layouts never drift)."""

from __future__ import annotations

from .document_store import doc_path


def days_collection(key: str) -> str:
    return doc_path("attendance", key, "days")


def day_path(key: str, iso_date: str) -> str:
    return doc_path("attendance", key, "days", iso_date)


def sessions_collection(key: str) -> str:
    return doc_path("attendance", key, "sessions")


def session_path(key: str, session_id: str) -> str:
    return doc_path("attendance", key, "sessions", session_id)


def selection_path(key: str) -> str:
    return doc_path("attendance", key, "meta", "selection")


def counters_path(key: str) -> str:
    return doc_path("attendance", key, "meta", "counters")


def config_path(key: str) -> str:
    return doc_path("configs", key)


def link_path(uid: str) -> str:
    return doc_path("links", uid)
