"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

import pytest
from postgrest.exceptions import APIError

from omad_tracker.adapters.supabase_daily_log_repository import (
    SupabaseDailyLogRepository,
)
from omad_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from omad_tracker.domain.models import UserProfile
from omad_tracker.errors import ConcurrencyConflictError
from tests.conftest import USER_EMAIL, USER_ID, make_log


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "update": [], "delete": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    failures: dict[str, Exception] = field(default_factory=dict)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((f"{column}>=", value))
        return self

    def lte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((f"{column}<=", value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        if action in self.failures:
            raise self.failures.pop(action)
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _log_row(log_date: str, **overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "user_id": USER_ID,
        "log_date": log_date,
        "omad_compliant": True,
        "alcohol_consumed": False,
        "weight": 180.5,
        "recorded_at": "2024-03-15T18:30:00+00:00",
        "version": "v1",
    }
    row.update(overrides)
    return row


def test_supabase_daily_log_repository_reads_rows() -> None:
    client = FakeSupabaseClient()
    table = client.table("daily_logs")
    table.queue("select", [_log_row("2024-03-15")])
    table.queue("select", [])
    table.queue("select", [_log_row("2024-03-01", weight=None), _log_row("2024-03-02")])

    repository = SupabaseDailyLogRepository(client)
    fetched = repository.get_log(USER_ID, date(2024, 3, 15))
    missing = repository.get_log(USER_ID, date(2024, 3, 16))
    ranged = repository.list_logs_between(USER_ID, date(2024, 3, 1), date(2024, 3, 31))

    assert fetched is not None
    assert fetched.day == date(2024, 3, 15)
    assert fetched.weight == 180.5
    assert fetched.version == "v1"
    assert missing is None
    assert ranged[0].weight is None
    assert ("log_date>=", "2024-03-01") in table.last_filters
    assert ("log_date<=", "2024-03-31") in table.last_filters


def test_supabase_daily_log_repository_insert_assigns_version() -> None:
    client = FakeSupabaseClient()
    table = client.table("daily_logs")
    table.queue("insert", [_log_row("2024-03-15", version="v2")])

    repository = SupabaseDailyLogRepository(client)
    saved = repository.insert_log(make_log(date(2024, 3, 15), weight=180.5))

    assert saved.version == "v2"
    assert isinstance(table.last_payload, dict)
    assert table.last_payload["log_date"] == "2024-03-15"
    assert table.last_payload["version"]


def test_supabase_daily_log_repository_insert_conflict_on_same_day() -> None:
    client = FakeSupabaseClient()
    table = client.table("daily_logs")
    table.failures["insert"] = APIError(
        {
            "code": "23505",
            "message": "duplicate key value violates unique constraint",
            "details": None,
            "hint": None,
        }
    )

    repository = SupabaseDailyLogRepository(client)

    with pytest.raises(ConcurrencyConflictError):
        repository.insert_log(make_log(date(2024, 3, 15), weight=180.5))


def test_supabase_daily_log_repository_reraises_other_insert_errors() -> None:
    client = FakeSupabaseClient()
    table = client.table("daily_logs")
    table.failures["insert"] = APIError(
        {"code": "42501", "message": "permission denied", "details": None, "hint": None}
    )

    repository = SupabaseDailyLogRepository(client)

    with pytest.raises(APIError):
        repository.insert_log(make_log(date(2024, 3, 15)))


def test_supabase_daily_log_repository_keeps_weights_decimal() -> None:
    client = FakeSupabaseClient()
    table = client.table("daily_logs")
    table.queue("insert", [_log_row("2024-03-15", weight=170.2)])

    repository = SupabaseDailyLogRepository(client)
    saved = repository.insert_log(make_log(date(2024, 3, 15), weight="170.2"))

    assert saved.weight == Decimal("170.2")
    assert isinstance(table.last_payload, dict)
    assert table.last_payload["weight"] == 170.2


def test_supabase_daily_log_repository_update_checks_version() -> None:
    client = FakeSupabaseClient()
    table = client.table("daily_logs")
    table.queue("update", [_log_row("2024-03-15", version="v3")])

    repository = SupabaseDailyLogRepository(client)
    saved = repository.update_log(make_log(date(2024, 3, 15)), expected_version="v1")

    assert saved.version == "v3"
    assert ("version", "v1") in table.last_filters
    with pytest.raises(ConcurrencyConflictError):
        repository.update_log(make_log(date(2024, 3, 15)), expected_version="v1")


def test_supabase_daily_log_repository_delete() -> None:
    client = FakeSupabaseClient()
    table = client.table("daily_logs")
    table.queue("delete", [_log_row("2024-03-15")])

    repository = SupabaseDailyLogRepository(client)

    assert repository.delete_log(USER_ID, date(2024, 3, 15)) is True
    assert repository.delete_log(USER_ID, date(2024, 3, 15)) is False


def test_supabase_profile_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    table = client.table("user_profiles")
    row = {
        "user_id": USER_ID,
        "email": USER_EMAIL,
        "height": "5'10\"",
        "starting_weight": 200,
        "start_date": "2024-01-01",
    }
    table.queue("insert", [row])
    table.queue("select", [row])
    table.queue("update", [{**row, "height": "178cm"}])

    repository = SupabaseProfileRepository(client)
    profile = UserProfile(
        user_id=USER_ID,
        email=USER_EMAIL,
        height="5'10\"",
        starting_weight=200,
        start_date=date(2024, 1, 1),
    )
    created = repository.create_profile(profile)
    fetched = repository.get_profile(USER_ID)
    updated = repository.update_profile(profile)

    assert created == profile
    assert fetched == profile
    assert updated.height == "178cm"
    assert table.last_payload == {"height": "5'10\"", "starting_weight": 200}


def test_supabase_profile_repository_raises_on_failed_insert() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseProfileRepository(client)
    profile = UserProfile(
        user_id=USER_ID,
        email=USER_EMAIL,
        height="6'0\"",
        starting_weight=190,
        start_date=date(2024, 1, 1),
    )

    with pytest.raises(RuntimeError):
        repository.create_profile(profile)
