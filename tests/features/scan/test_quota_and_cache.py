from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from app.features.scan.models.scan_result import ScanResult
from app.features.scan.services.cache.result_cache import ResultCache
from app.features.scan.services.quota.quota_guard import QuotaGuard
from app.platform.exceptions import RateLimited


def _broken_session():
    db = AsyncMock()
    db.execute.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))
    return db


def _record(session_id, client_ip="203.0.113.7", url="https://sunriseclinic.com", **fields):
    return ScanResult(
        session_id=session_id,
        website_url=url,
        client_ip=client_ip,
        http_status=fields.pop("http_status", 200),
        **fields,
    )


async def test_quota_counts_only_the_window(db_session):
    db_session.add_all([_record(f"s{i}") for i in range(2)])
    db_session.add(_record("old", created_at=datetime.utcnow() - timedelta(minutes=90)))
    db_session.add(_record("someone-else", client_ip="192.0.2.1"))
    await db_session.commit()

    decision = await QuotaGuard(limit=3).check(db_session, "203.0.113.7")

    assert decision.allowed is True
    assert decision.remaining == 1


async def test_quota_enforced_at_limit(db_session):
    db_session.add_all([_record(f"s{i}") for i in range(3)])
    await db_session.commit()

    with pytest.raises(RateLimited) as exc_info:
        await QuotaGuard(limit=3, retry_after=3600).enforce(db_session, "203.0.113.7")

    assert exc_info.value.retry_after == 3600
    assert exc_info.value.status_code == 429


async def test_quota_fails_open_on_storage_error():
    db = _broken_session()

    decision = await QuotaGuard(limit=5).check(db, "203.0.113.7")

    assert decision.allowed is True
    db.rollback.assert_awaited_once()


async def test_cache_returns_latest_successful_scan(db_session):
    db_session.add(_record("older", created_at=datetime.utcnow() - timedelta(minutes=30)))
    db_session.add(_record("newer", created_at=datetime.utcnow() - timedelta(minutes=5)))
    db_session.add(_record("failed", http_status=0))
    await db_session.commit()

    record = await ResultCache(ttl_minutes=60).lookup(db_session, "https://sunriseclinic.com")

    assert record.session_id == "newer"


async def test_cache_miss_outside_ttl(db_session):
    db_session.add(_record("stale", created_at=datetime.utcnow() - timedelta(minutes=61)))
    await db_session.commit()

    assert await ResultCache(ttl_minutes=60).lookup(db_session, "https://sunriseclinic.com") is None


async def test_cache_storage_error_is_a_miss():
    assert await ResultCache().lookup(_broken_session(), "https://sunriseclinic.com") is None


def _session_with_count(count):
    db = AsyncMock()
    result = MagicMock()
    result.scalar_one.return_value = count
    db.execute.return_value = result
    return db


async def test_scans_in_progress_hold_their_slot():
    db = _session_with_count(4)
    guard = QuotaGuard(limit=5)

    async with guard.admit(db, "203.0.113.50") as decision:
        assert decision.remaining == 1

        with pytest.raises(RateLimited):
            async with guard.admit(db, "203.0.113.50"):
                pass

        async with guard.admit(db, "198.51.100.8") as other:
            assert other.allowed is True

    async with guard.admit(db, "203.0.113.50") as decision:
        assert decision.allowed is True
    assert "203.0.113.50" not in QuotaGuard._in_flight


async def test_slot_released_when_scan_fails():
    guard = QuotaGuard(limit=5)

    with pytest.raises(RuntimeError):
        async with guard.admit(_session_with_count(0), "203.0.113.51"):
            raise RuntimeError("root fetch failed")

    assert "203.0.113.51" not in QuotaGuard._in_flight
