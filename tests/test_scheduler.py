"""
Tests for the daily quota reset scheduler.
"""
import threading
from datetime import datetime, timedelta, timezone

import pytest

from app.permissions import ActionKind, User, UserPermissions
from app.permissions.scheduler import DailyResetScheduler, RESET_JOB_ID


class TestNextResetTime:

    def test_later_today(self):
        scheduler = DailyResetScheduler(lambda: None, reset_hour=23)
        now = datetime(2024, 5, 1, 22, 30, tzinfo=timezone.utc)
        assert scheduler.next_reset_time(now) == datetime(2024, 5, 1, 23, 0, tzinfo=timezone.utc)

    def test_tomorrow(self):
        scheduler = DailyResetScheduler(lambda: None, reset_hour=0)
        now = datetime(2024, 5, 1, 0, 0, 1, tzinfo=timezone.utc)
        assert scheduler.next_reset_time(now) == datetime(2024, 5, 2, 0, 0, tzinfo=timezone.utc)

    def test_other_timezone(self):
        scheduler = DailyResetScheduler(lambda: None, reset_hour=0)
        paris = timezone(timedelta(hours=2))
        now = datetime(2024, 5, 1, 1, 0, tzinfo=paris)  # 23:00 UTC the day before
        assert scheduler.next_reset_time(now) - now == timedelta(hours=1)

    @pytest.mark.parametrize("hour", [-1, 24])
    def test_invalid_hour(self, hour):
        with pytest.raises(ValueError):
            DailyResetScheduler(lambda: None, reset_hour=hour)


class TestDailyResetScheduler:

    def test_start_schedules_daily_job(self):
        scheduler = DailyResetScheduler(lambda: None, reset_hour=4)
        assert not scheduler.running
        assert scheduler.get_job() is None

        scheduler.start()
        try:
            assert scheduler.running
            job = scheduler.get_job()
            assert job.id == RESET_JOB_ID
            assert job.next_run_time.astimezone(timezone.utc).hour == 4
            assert job.next_run_time > datetime.now(timezone.utc)
        finally:
            scheduler.stop()

        assert not scheduler.running
        assert scheduler.get_job() is None

    def test_start_twice_keeps_one_job(self):
        scheduler = DailyResetScheduler(lambda: None)
        scheduler.start()
        try:
            scheduler.start()
            assert scheduler.running
        finally:
            scheduler.stop()
        scheduler.stop()
        assert not scheduler.running

    def test_resets_when_due(self):
        permissions = UserPermissions()
        user = User(id=1, reputation=42)
        permissions.record(user, ActionKind.FLAG_COMMENT)

        reset_done = threading.Event()

        def reset():
            permissions.reset()
            reset_done.set()

        scheduler = DailyResetScheduler(reset, reset_hour=0)
        scheduler.start()
        try:
            scheduler.get_job().modify(next_run_time=datetime.now(timezone.utc))
            assert reset_done.wait(5)
        finally:
            scheduler.stop()

        assert permissions.occurrences(user, ActionKind.FLAG_COMMENT) == 0

    def test_restart_after_stop(self):
        calls = []
        scheduler = DailyResetScheduler(lambda: calls.append(1))
        scheduler.start()
        scheduler.stop()
        scheduler.start()
        try:
            assert scheduler.running
            assert scheduler.get_job() is not None
        finally:
            scheduler.stop()
        assert calls == []
