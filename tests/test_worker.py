"""Tests for the yearly rollover worker and its settings."""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError
from sqlmodel import col, select

from leave_rollover import worker
from leave_rollover.config import Settings
from leave_rollover.models import LeaveBalance, LeaveBalanceHistory, LeaveType
from leave_rollover.worker import next_run_at, run_scheduled_year_end_reset

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sqlalchemy.ext.asyncio import AsyncSession


# ---------------------------------------------------------------------------
# Schedule
# ---------------------------------------------------------------------------


class TestNextRunAt:
    def test_default_is_dec_31_2330_utc(self) -> None:
        settings = Settings()

        assert next_run_at(settings, datetime(2024, 3, 1, tzinfo=UTC)) == datetime(2024, 12, 31, 23, 30, tzinfo=UTC)

    def test_after_fire_time_moves_to_next_year(self) -> None:
        settings = Settings()

        assert next_run_at(settings, datetime(2024, 12, 31, 23, 45, tzinfo=UTC)) == datetime(
            2025, 12, 31, 23, 30, tzinfo=UTC
        )

    def test_exact_fire_time_moves_to_next_year(self) -> None:
        settings = Settings()
        fire_at = datetime(2024, 12, 31, 23, 30, tzinfo=UTC)

        assert next_run_at(settings, fire_at) == datetime(2025, 12, 31, 23, 30, tzinfo=UTC)

    def test_custom_schedule(self) -> None:
        settings = Settings(
            year_end_reset_month=1,
            year_end_reset_day=1,
            year_end_reset_hour=0,
            year_end_reset_minute=5,
        )

        assert next_run_at(settings, datetime(2024, 6, 1, tzinfo=UTC)) == datetime(2025, 1, 1, 0, 5, tzinfo=UTC)


class TestSettings:
    def test_rejects_impossible_date(self) -> None:
        with pytest.raises(ValidationError):
            Settings(year_end_reset_month=2, year_end_reset_day=30)

    def test_rejects_leap_day(self) -> None:
        with pytest.raises(ValidationError):
            Settings(year_end_reset_month=2, year_end_reset_day=29)

    def test_notifications_off_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ENABLE_YEAR_END_NOTIFICATIONS", raising=False)
        monkeypatch.delenv("YEAR_END_NOTIFICATIONS_ENABLED", raising=False)

        assert Settings().year_end_notifications_enabled is False

    def test_notifications_from_legacy_env_name(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENABLE_YEAR_END_NOTIFICATIONS", "true")

        assert Settings().year_end_notifications_enabled is True


# ---------------------------------------------------------------------------
# Scheduled run
# ---------------------------------------------------------------------------


def _factory_for(session: AsyncSession):  # type: ignore[no-untyped-def]
    @asynccontextmanager
    async def _factory() -> AsyncIterator[AsyncSession]:
        yield session

    return _factory


class TestScheduledRun:
    async def test_runs_reset(self, db_session: AsyncSession) -> None:
        db_session.add(
            LeaveBalance(
                employee_id=uuid.uuid4(),
                year=datetime.now(UTC).year,
                leave_type=LeaveType.EARNED,
                total_allocated=Decimal(12),
                used_days=Decimal(2),
                available_days=Decimal(10),
            )
        )
        await db_session.flush()

        result = await run_scheduled_year_end_reset(_factory_for(db_session), notify_employees=False)

        assert result is not None
        assert (result.archived_count, result.reset_count) == (1, 1)

    async def test_swallows_errors(self, caplog: pytest.LogCaptureFixture) -> None:
        @asynccontextmanager
        async def _broken_factory() -> AsyncIterator[AsyncSession]:
            msg = "database unreachable"
            raise ConnectionError(msg)
            yield  # pragma: no cover

        result = await run_scheduled_year_end_reset(_broken_factory, notify_employees=True)  # type: ignore[arg-type]

        assert result is None
        assert "Error during scheduled year-end leave balance reset" in caplog.text

    async def test_scheduled_year_wins_over_clock(self, db_session: AsyncSession) -> None:
        employee_id = uuid.uuid4()
        db_session.add(
            LeaveBalance(
                employee_id=employee_id,
                year=2024,
                leave_type=LeaveType.SICK,
                total_allocated=Decimal(8),
                used_days=Decimal(3),
                available_days=Decimal(5),
            )
        )
        await db_session.flush()

        result = await run_scheduled_year_end_reset(
            _factory_for(db_session),
            notify_employees=False,
            scheduled_for=datetime(2024, 12, 31, 23, 30, tzinfo=UTC),
        )

        assert result is not None
        assert (result.archived_count, result.reset_count) == (1, 1)
        history = (await db_session.execute(select(LeaveBalanceHistory))).scalars().all()
        assert [h.year for h in history] == [2024]
        new_balance = (
            await db_session.execute(select(LeaveBalance).where(col(LeaveBalance.year) == 2025))
        ).scalars().one()
        assert new_balance.employee_id == employee_id


# ---------------------------------------------------------------------------
# Loop
# ---------------------------------------------------------------------------


class _StopLoop(Exception):
    pass


class TestResetLoop:
    async def test_wakes_hourly_and_runs_for_scheduled_year_when_late(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        clock = iter(
            [
                datetime(2024, 12, 31, 21, 0, tzinfo=UTC),
                datetime(2024, 12, 31, 21, 0, tzinfo=UTC),
                datetime(2024, 12, 31, 22, 0, tzinfo=UTC),
                datetime(2025, 1, 1, 1, 0, tzinfo=UTC),
            ]
        )
        slept: list[float] = []
        runs: list[datetime | None] = []

        async def _fake_sleep(seconds: float) -> None:
            slept.append(seconds)

        async def _fake_run(
            _session_factory: object, _notify: bool, scheduled_for: datetime | None = None
        ) -> None:
            runs.append(scheduled_for)
            raise _StopLoop

        monkeypatch.setattr(worker, "_utcnow", lambda: next(clock))
        monkeypatch.setattr(worker, "_sleep", _fake_sleep)
        monkeypatch.setattr(worker, "run_scheduled_year_end_reset", _fake_run)

        with pytest.raises(_StopLoop):
            await worker.run_reset_loop(Settings(), session_factory=_factory_for(None))  # type: ignore[arg-type]

        assert slept == [worker.WAKE_INTERVAL_SECONDS, worker.WAKE_INTERVAL_SECONDS]
        assert runs == [datetime(2024, 12, 31, 23, 30, tzinfo=UTC)]
        assert "Year-end reset running late" in caplog.text

    async def test_on_time_run_sleeps_only_the_remainder(self, monkeypatch: pytest.MonkeyPatch) -> None:
        clock = iter(
            [
                datetime(2024, 12, 31, 23, 29, 30, tzinfo=UTC),
                datetime(2024, 12, 31, 23, 29, 30, tzinfo=UTC),
                datetime(2024, 12, 31, 23, 30, 0, tzinfo=UTC),
            ]
        )
        slept: list[float] = []

        async def _fake_sleep(seconds: float) -> None:
            slept.append(seconds)

        async def _fake_run(*_args: object, **_kwargs: object) -> None:
            raise _StopLoop

        monkeypatch.setattr(worker, "_utcnow", lambda: next(clock))
        monkeypatch.setattr(worker, "_sleep", _fake_sleep)
        monkeypatch.setattr(worker, "run_scheduled_year_end_reset", _fake_run)

        with pytest.raises(_StopLoop):
            await worker.run_reset_loop(Settings(), session_factory=_factory_for(None))  # type: ignore[arg-type]

        assert slept == [30.0]
