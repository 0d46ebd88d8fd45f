from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.confirmation import ConfirmationFlow
from .attendance.document_repository import DocumentDayStatusStore
from .attendance.service import AttendanceService
from .common.clock import Clock
from .core.constants import (
    DEFAULT_PANEL_CONFIG_TTL_SECONDS,
    DEFAULT_PANEL_INDEX_PATH,
    DEFAULT_SESSION_LIST_LIMIT,
    DEFAULT_TIMEZONE_OFFSET_MINUTES,
)
from .database.connection import DBConfig, DatabaseConnection
from .database.document_store import DocumentStore
from .database.memory_store import InMemoryDocumentStore
from .database.mysql_store import MySQLDocumentStore
from .reports.aggregator import AttendanceAggregator
from .reports.service import ReportService
from .sessions.document_repository import DocumentSessionRegistry
from .sessions.resolver import SessionResolver
from .sessions.service import SessionService
from .users.document_repository import DocumentAccountLinkRepository, DocumentUserConfigRepository
from .users.identity import UserKeyResolver
from .users.service import UserConfigService
from .workdays.policy import WorkingDayPolicy


@dataclass(frozen=True)
class Container:
    clock: Clock
    store: DocumentStore
    conn: Optional[DatabaseConnection]

    days_repo: DocumentDayStatusStore
    sessions_repo: DocumentSessionRegistry
    configs_repo: DocumentUserConfigRepository
    links_repo: DocumentAccountLinkRepository

    keys: UserKeyResolver
    policy: WorkingDayPolicy
    resolver: SessionResolver
    aggregator: AttendanceAggregator

    attendance_service: AttendanceService
    session_service: SessionService
    report_service: ReportService
    user_config_service: UserConfigService


def build_store(*, storage_backend: str, db_config: Optional[dict]) -> tuple[DocumentStore, Optional[DatabaseConnection]]:
    backend = (storage_backend or "mysql").strip().lower()
    if backend == "memory":
        return InMemoryDocumentStore(), None
    if backend == "mysql":
        if not db_config:
            raise ValueError("DB_CONFIG is required for the mysql storage backend")
        conn = DatabaseConnection(DBConfig.from_dict(db_config))
        return MySQLDocumentStore(conn), conn
    raise ValueError(f"Unknown STORAGE_BACKEND: {storage_backend!r}")


def build_container(
    *,
    storage_backend: str = "mysql",
    db_config: Optional[dict] = None,
    store: Optional[DocumentStore] = None,
    clock: Optional[Clock] = None,
    timezone_offset_minutes: int = DEFAULT_TIMEZONE_OFFSET_MINUTES,
    panel_index_path: str = DEFAULT_PANEL_INDEX_PATH,
    panel_config_ttl_seconds: float = DEFAULT_PANEL_CONFIG_TTL_SECONDS,
    session_list_limit: int = DEFAULT_SESSION_LIST_LIMIT,
) -> Container:
    """Wire repositories and services around one explicitly built storage handle."""

    conn: Optional[DatabaseConnection] = None
    if store is None:
        store, conn = build_store(storage_backend=storage_backend, db_config=db_config)
    clock = clock or Clock(timezone_offset_minutes)

    days_repo = DocumentDayStatusStore(store, clock)
    sessions_repo = DocumentSessionRegistry(store, clock)
    configs_repo = DocumentUserConfigRepository(
        store, panel_path=panel_index_path, panel_ttl_seconds=panel_config_ttl_seconds
    )
    links_repo = DocumentAccountLinkRepository(store)

    keys = UserKeyResolver(links_repo, clock)
    policy = WorkingDayPolicy()
    resolver = SessionResolver(sessions_repo, days_repo, clock, list_limit=session_list_limit)
    aggregator = AttendanceAggregator(days_repo, configs_repo, clock, policy)

    attendance_service = AttendanceService(
        days_repo,
        configs_repo,
        keys,
        clock=clock,
        policy=policy,
        flow=ConfirmationFlow(days_repo),
    )
    session_service = SessionService(sessions_repo, keys, list_limit=session_list_limit)
    report_service = ReportService(aggregator, resolver, keys, clock)
    user_config_service = UserConfigService(configs_repo, keys)

    return Container(
        clock=clock,
        store=store,
        conn=conn,
        days_repo=days_repo,
        sessions_repo=sessions_repo,
        configs_repo=configs_repo,
        links_repo=links_repo,
        keys=keys,
        policy=policy,
        resolver=resolver,
        aggregator=aggregator,
        attendance_service=attendance_service,
        session_service=session_service,
        report_service=report_service,
        user_config_service=user_config_service,
    )
