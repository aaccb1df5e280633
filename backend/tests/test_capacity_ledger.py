"""
Tests for the capacity ledgers, including concurrent admission scenarios.
"""

import asyncio
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import LockNotOwnedError
from sqlalchemy.exc import OperationalError

from ticketing.core.errors import (
    AdmissionTimeoutError,
    CapacityExceededError,
    StoreError,
    UnknownReferenceError,
)
from ticketing.services.admission_service import RedisLockLedger
from ticketing.services.event_locks import EventLockRegistry
from ticketing.services.interfaces.local_ledger import LocalLockLedger

BOOKED_AT = datetime(2026, 10, 18, 12, 0, 0)


async def _reserve_all(ledger, user_ids, event_id):
    return await asyncio.gather(
        *(ledger.reserve(user_id, event_id, BOOKED_AT) for user_id in user_ids),
        return_exceptions=True,
    )


@pytest.mark.asyncio
async def test_reserve_issues_ticket(services, test_user, test_event):
    ticket = await services.ledger.reserve(test_user.id, test_event.id, BOOKED_AT)

    assert ticket.id is not None
    assert ticket.user_id == test_user.id
    assert ticket.event_id == test_event.id
    assert ticket.booking_date == BOOKED_AT
    assert await services.store.count_tickets_for_event(test_event.id) == 1


@pytest.mark.asyncio
async def test_concurrent_reservations_never_oversell(services, make_user, make_event):
    """12 concurrent attempts against 5 tickets: exactly 5 succeed."""
    event = await make_event(max_tickets=5)
    users = [await make_user(f"User {i}") for i in range(12)]

    results = await _reserve_all(services.ledger, [u.id for u in users], event.id)

    issued = [r for r in results if not isinstance(r, Exception)]
    rejected = [r for r in results if isinstance(r, CapacityExceededError)]
    assert len(issued) == 5
    assert len(rejected) == 7
    assert await services.store.count_tickets_for_event(event.id) == 5


@pytest.mark.asyncio
async def test_last_ticket_goes_to_exactly_one_caller(services, make_user, make_event):
    event = await make_event(max_tickets=1)
    first = await make_user("First")
    second = await make_user("Second")

    results = await _reserve_all(services.ledger, [first.id, second.id], event.id)

    assert sum(1 for r in results if isinstance(r, CapacityExceededError)) == 1
    assert sum(1 for r in results if not isinstance(r, Exception)) == 1
    assert await services.store.count_tickets_for_event(event.id) == 1


@pytest.mark.asyncio
async def test_capacity_counts_tickets_issued_earlier(services, make_user, make_event):
    event = await make_event(max_tickets=3)
    early = await make_user("Early")
    await services.ledger.reserve(early.id, event.id, BOOKED_AT)
    await services.ledger.reserve(early.id, event.id, BOOKED_AT)

    late = [await make_user(f"Late {i}") for i in range(4)]
    results = await _reserve_all(services.ledger, [u.id for u in late], event.id)

    assert sum(1 for r in results if not isinstance(r, Exception)) == 1
    assert await services.store.count_tickets_for_event(event.id) == 3


@pytest.mark.asyncio
async def test_zero_capacity_rejects_everything(services, make_user, make_event):
    event = await make_event(max_tickets=0)
    users = [await make_user(f"User {i}") for i in range(3)]

    results = await _reserve_all(services.ledger, [u.id for u in users], event.id)

    assert all(isinstance(r, CapacityExceededError) for r in results)
    assert results[0].max_tickets == 0
    assert await services.store.count_tickets_for_event(event.id) == 0


@pytest.mark.asyncio
async def test_unknown_event_is_rejected(services, test_user):
    with pytest.raises(UnknownReferenceError):
        await services.ledger.reserve(test_user.id, 424242, BOOKED_AT)


@pytest.mark.asyncio
async def test_unknown_user_creates_no_ticket(services, test_event):
    with pytest.raises(UnknownReferenceError):
        await services.ledger.reserve(999, test_event.id, BOOKED_AT)
    assert await services.store.count_tickets_for_event(test_event.id) == 0


@pytest.mark.asyncio
async def test_events_do_not_share_a_lock(services, test_user, make_event):
    """A held lock on one event must not delay admissions on another."""
    busy = await make_event(event_name="Busy")
    quiet = await make_event(event_name="Quiet")

    async with services.ledger.locks.hold(busy.id, timeout=1):
        assert services.ledger.locks.is_locked(busy.id)
        ticket = await asyncio.wait_for(
            services.ledger.reserve(test_user.id, quiet.id, BOOKED_AT),
            timeout=5,
        )

    assert ticket.event_id == quiet.id
    assert await services.store.count_tickets_for_event(busy.id) == 0


@pytest.mark.asyncio
async def test_admission_wait_is_bounded(services, database, test_user, test_event):
    locks = EventLockRegistry()
    ledger = LocalLockLedger(database, services.store, lock_timeout=0.05, locks=locks)

    async with locks.hold(test_event.id, timeout=1):
        with pytest.raises(AdmissionTimeoutError) as exc_info:
            await ledger.reserve(test_user.id, test_event.id, BOOKED_AT)

    assert isinstance(exc_info.value, StoreError)
    assert await services.store.count_tickets_for_event(test_event.id) == 0


@pytest.mark.asyncio
async def test_store_failure_mid_admission_leaves_no_ticket(services, test_user, test_event, monkeypatch):
    create_ticket = services.store.create_ticket

    async def insert_then_fail(session, *args):
        await create_ticket(session, *args)
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(services.store, "create_ticket", insert_then_fail)

    with pytest.raises(StoreError):
        await services.ledger.reserve(test_user.id, test_event.id, BOOKED_AT)

    monkeypatch.undo()
    assert await services.store.count_tickets_for_event(test_event.id) == 0
    # The failed attempt did not consume capacity or wedge the lock
    ticket = await services.ledger.reserve(test_user.id, test_event.id, BOOKED_AT)
    assert ticket.id is not None


@pytest.mark.asyncio
async def test_lock_registry_forgets_idle_events(services, make_user, test_event):
    users = [await make_user(f"User {i}") for i in range(4)]
    await _reserve_all(services.ledger, [u.id for u in users], test_event.id)
    assert len(services.ledger.locks) == 0


@pytest.mark.asyncio
async def test_cancelled_waiter_releases_its_slot():
    locks = EventLockRegistry()

    async with locks.hold(1, timeout=1):
        waiter = asyncio.create_task(_hold_briefly(locks, 1))
        await asyncio.sleep(0)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

    assert len(locks) == 0


async def _hold_briefly(locks, event_id):
    async with locks.hold(event_id, timeout=5):
        pass


def _redis_with_lock(acquire_result=True, acquire_error=None):
    lock = MagicMock()
    lock.acquire = AsyncMock(return_value=acquire_result, side_effect=acquire_error)
    lock.release = AsyncMock()
    client = MagicMock()
    client.lock.return_value = lock
    return client, lock


@pytest.mark.asyncio
async def test_redis_ledger_locks_per_event(services, database, test_user, test_event):
    client, lock = _redis_with_lock()
    ledger = RedisLockLedger(database, services.store, client, lock_timeout=2, lock_lease=10)

    ticket = await ledger.reserve(test_user.id, test_event.id, BOOKED_AT)

    assert ticket.event_id == test_event.id
    client.lock.assert_called_once_with(f"admission:{test_event.id}", timeout=10, blocking_timeout=2)
    lock.acquire.assert_awaited_once()
    lock.release.assert_awaited_once()


@pytest.mark.asyncio
async def test_redis_ledger_times_out(services, database, test_user, test_event):
    client, lock = _redis_with_lock(acquire_result=False)
    ledger = RedisLockLedger(database, services.store, client, lock_timeout=0.1, lock_lease=10)

    with pytest.raises(AdmissionTimeoutError):
        await ledger.reserve(test_user.id, test_event.id, BOOKED_AT)

    lock.release.assert_not_awaited()
    assert await services.store.count_tickets_for_event(test_event.id) == 0


@pytest.mark.asyncio
async def test_redis_ledger_falls_back_to_local_lock(services, database, make_user, make_event):
    event = await make_event(max_tickets=2)
    users = [await make_user(f"User {i}") for i in range(5)]
    client, _ = _redis_with_lock(acquire_error=RedisConnectionError("connection refused"))
    ledger = RedisLockLedger(database, services.store, client, lock_timeout=5, lock_lease=10)

    results = await _reserve_all(ledger, [u.id for u in users], event.id)

    assert sum(1 for r in results if not isinstance(r, Exception)) == 2
    assert sum(1 for r in results if isinstance(r, CapacityExceededError)) == 3


@pytest.mark.asyncio
async def test_redis_ledger_tolerates_expired_lease(services, database, test_user, test_event):
    client, lock = _redis_with_lock()
    lock.release.side_effect = LockNotOwnedError("lease expired")
    ledger = RedisLockLedger(database, services.store, client, lock_timeout=2, lock_lease=10)

    ticket = await ledger.reserve(test_user.id, test_event.id, BOOKED_AT)

    assert ticket.id is not None
    assert await services.store.count_tickets_for_event(test_event.id) == 1
