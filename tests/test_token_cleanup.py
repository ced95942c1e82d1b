import asyncio
from datetime import timedelta

from sqlalchemy.orm import Session

from accounts.db.models.token import Token as TokenModel
from accounts.services.token import utcnow
from accounts.services.token_cleanup import TokenCleanupScheduler

EXPIRE_AFTER = timedelta(days=7)
FAST_INTERVAL = timedelta(milliseconds=10)


def seed_tokens(db: Session, user_id: int | None = None) -> None:
    now = utcnow()
    db.add(TokenModel(token="expired-token", user_id=user_id, last_used_at=now - timedelta(days=8)))
    db.add(TokenModel(token="live-token", user_id=user_id, last_used_at=now - timedelta(days=1)))
    db.commit()


def stored_tokens(db: Session) -> set[str]:
    db.expire_all()
    return {row.token for row in db.query(TokenModel).all()}


def run_scheduler_for(scheduler: TokenCleanupScheduler, seconds: float) -> None:
    async def scenario():
        scheduler.start()
        assert scheduler.running
        await asyncio.sleep(seconds)
        await scheduler.stop()
        assert not scheduler.running

    asyncio.run(scenario())


def test_run_once_removes_expired_tokens(db: Session, session_factory, active_user):
    seed_tokens(db, active_user.id)
    scheduler = TokenCleanupScheduler(session_factory, FAST_INTERVAL, EXPIRE_AFTER)

    assert scheduler.run_once() == 1
    assert stored_tokens(db) == {"live-token"}


def test_run_once_ignores_owner(db: Session, session_factory):
    """Test anonymous tokens are swept like owned ones."""
    seed_tokens(db, None)
    scheduler = TokenCleanupScheduler(session_factory, FAST_INTERVAL, EXPIRE_AFTER)

    scheduler.run_once()
    assert stored_tokens(db) == {"live-token"}


def test_scheduled_tick_clears_expired_token(db: Session, session_factory, active_user):
    seed_tokens(db, active_user.id)
    scheduler = TokenCleanupScheduler(session_factory, FAST_INTERVAL, EXPIRE_AFTER)

    run_scheduler_for(scheduler, 0.3)

    assert stored_tokens(db) == {"live-token"}


def test_nothing_is_swept_before_first_tick(db: Session, session_factory, active_user):
    seed_tokens(db, active_user.id)
    scheduler = TokenCleanupScheduler(session_factory, timedelta(hours=1), EXPIRE_AFTER)

    run_scheduler_for(scheduler, 0.05)

    assert stored_tokens(db) == {"expired-token", "live-token"}


def test_failed_sweep_is_retried_on_next_tick(db: Session, session_factory, active_user):
    """Test a sweep failure does not stop the loop."""
    seed_tokens(db, active_user.id)
    calls = {"count": 0}

    def flaky_clock():
        calls["count"] += 1
        if calls["count"] == 1:
            raise RuntimeError("clock unavailable")
        return utcnow()

    scheduler = TokenCleanupScheduler(
        session_factory, FAST_INTERVAL, EXPIRE_AFTER, clock=flaky_clock
    )

    run_scheduler_for(scheduler, 0.3)

    assert calls["count"] >= 2
    assert stored_tokens(db) == {"live-token"}


def test_stop_without_start_is_harmless(session_factory):
    scheduler = TokenCleanupScheduler(session_factory, FAST_INTERVAL, EXPIRE_AFTER)
    asyncio.run(scheduler.stop())
    assert not scheduler.running
