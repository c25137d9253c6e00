"""
Tests for the session observer race between the one-shot identity
query and the change feed.
"""

import asyncio

import pytest

from app.identity_service.observer import SessionObserver
from app.identity_service.schemas import SessionStatus


async def _start_pending(observer, provider):
    """Start initialize() with the identity query held back."""
    provider.query_gate.clear()
    task = asyncio.create_task(observer.initialize())
    await asyncio.sleep(0)
    return task


@pytest.mark.asyncio
async def test_query_result_sets_state(provider, user_one):
    observer = SessionObserver(provider)
    assert observer.loading is True

    await observer.initialize()

    assert observer.loading is False
    assert observer.state.status is SessionStatus.AUTHENTICATED
    assert observer.identity == user_one


@pytest.mark.asyncio
async def test_query_without_user_is_anonymous(make_provider):
    observer = SessionObserver(make_provider(identity=None))

    await observer.initialize()

    assert observer.state.status is SessionStatus.ANONYMOUS
    assert observer.identity is None


@pytest.mark.asyncio
async def test_event_after_query_overrides_query(provider, user_two):
    observer = SessionObserver(provider)
    await observer.initialize()

    provider.emit(user_two)

    assert observer.identity == user_two


@pytest.mark.asyncio
async def test_event_before_query_wins_and_query_is_dropped(provider):
    observer = SessionObserver(provider)
    task = await _start_pending(observer, provider)

    provider.emit(None)
    assert observer.state.status is SessionStatus.ANONYMOUS

    provider.query_gate.set()
    await task

    # The query said "u1" but the feed had already spoken
    assert observer.state.status is SessionStatus.ANONYMOUS


@pytest.mark.asyncio
async def test_latest_event_wins(provider, user_one, user_two):
    observer = SessionObserver(provider)
    task = await _start_pending(observer, provider)

    provider.emit(user_two)
    provider.emit(None)
    provider.emit(user_one)

    provider.query_gate.set()
    await task

    assert observer.identity == user_one


@pytest.mark.asyncio
async def test_event_from_worker_thread_is_applied_on_loop(provider, user_two):
    observer = SessionObserver(provider)
    task = await _start_pending(observer, provider)

    await asyncio.to_thread(provider.emit, user_two)
    await asyncio.sleep(0)

    provider.query_gate.set()
    await task

    assert observer.identity == user_two


@pytest.mark.asyncio
async def test_failed_query_fails_open_to_anonymous(make_provider):
    provider = make_provider(error=ConnectionError("auth server down"))
    observer = SessionObserver(provider)

    await observer.initialize()

    assert observer.loading is False
    assert observer.state.status is SessionStatus.ANONYMOUS


@pytest.mark.asyncio
async def test_listeners_receive_each_transition(provider, user_two):
    seen = []
    observer = SessionObserver(provider, on_change=seen.append)

    await observer.initialize()
    provider.emit(user_two)
    provider.emit(None)

    assert [s.status for s in seen] == [
        SessionStatus.AUTHENTICATED,
        SessionStatus.AUTHENTICATED,
        SessionStatus.ANONYMOUS,
    ]
    assert seen[1].identity == user_two


@pytest.mark.asyncio
async def test_failing_listener_does_not_block_others(provider):
    seen = []

    def broken(_state):
        raise RuntimeError("render failed")

    observer = SessionObserver(provider, on_change=broken)
    observer.add_listener(seen.append)

    await observer.initialize()

    assert len(seen) == 1


@pytest.mark.asyncio
async def test_initialize_only_runs_once(provider):
    observer = SessionObserver(provider)

    await observer.initialize()
    await observer.initialize()

    assert provider.queries == 1
    assert len(provider.callbacks) == 1


@pytest.mark.asyncio
async def test_dispose_cancels_subscription(provider):
    observer = SessionObserver(provider)
    await observer.initialize()

    observer.dispose()
    observer.dispose()

    assert provider.cancelled == 1
    assert provider.callbacks == []


@pytest.mark.asyncio
async def test_no_updates_after_dispose(provider, user_two):
    seen = []
    observer = SessionObserver(provider)
    await observer.initialize()
    callback = provider.callbacks[0]
    observer.add_listener(seen.append)
    before = observer.state

    observer.dispose()
    # A provider that keeps delivering after cancellation
    callback(user_two)
    callback(None)

    assert observer.state == before
    assert seen == []


@pytest.mark.asyncio
async def test_dispose_drops_pending_query_result(provider):
    observer = SessionObserver(provider)
    task = await _start_pending(observer, provider)

    observer.dispose()
    provider.query_gate.set()
    await task

    assert observer.loading is True
    assert provider.cancelled == 1


@pytest.mark.asyncio
async def test_context_manager_releases_on_exit(provider, user_one):
    async with SessionObserver(provider) as observer:
        assert observer.identity == user_one

    assert observer.disposed is True
    assert provider.cancelled == 1


@pytest.mark.asyncio
async def test_context_manager_releases_on_error(provider):
    with pytest.raises(ValueError):
        async with SessionObserver(provider):
            raise ValueError("page crashed")

    assert provider.cancelled == 1


@pytest.mark.asyncio
async def test_repeated_identity_does_not_notify_listeners(provider, user_one):
    seen = []
    observer = SessionObserver(provider, on_change=seen.append)
    await observer.initialize()

    # e.g. TOKEN_REFRESHED for the user already signed in
    provider.emit(user_one)
    provider.emit(user_one)

    assert len(seen) == 1
    assert observer.identity == user_one
