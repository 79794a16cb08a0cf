"""生命周期与过期清理测试"""

from datetime import timedelta
from decimal import Decimal

import pytest

from fairsplit.core.exceptions import GameExpired, GameNotFound
from fairsplit.core.locks import game_locks
from fairsplit.core.utils import utcnow
from fairsplit.models import Bid, Game, GameStatus, Item, Participant
from fairsplit.services.lifecycle_service import LifecycleManager
from fairsplit.services.repository import GameRepository
from fairsplit.services.sweeper import run_sweep

from .conftest import run


def load(db, game_id):
    db.expire_all()
    return db.get(Game, game_id)


def resolve(service, game, items, participants):
    (a, b), (p1, p2) = items, participants
    run(service.propose_price(game.id, a.id, p1.id, "40"))
    run(service.confirm_bid(game.id, b.id, p2.id))


class TestExpiryWindows:

    def test_new_game_expires_after_active_ttl(self, make_game, db):
        game, _, _ = make_game()
        stored = load(db, game.id)
        assert stored.expires_at - stored.last_active == timedelta(hours=48)

    def test_read_extends_active_game(self, service, make_game, db):
        game, _, _ = make_game()
        stale = utcnow() - timedelta(hours=10)
        db.query(Game).filter(Game.id == game.id).update({"last_active": stale, "expires_at": stale + timedelta(hours=48)})
        db.commit()

        run(service.get_game(game.id))
        stored = load(db, game.id)
        assert stored.last_active > stale
        assert stored.expires_at == stored.last_active + timedelta(hours=48)

    def test_resolution_shortens_window(self, service, make_game, db):
        game, items, participants = make_game()
        resolve(service, game, items, participants)
        stored = load(db, game.id)
        assert stored.status == GameStatus.RESOLVED
        assert stored.expires_at == stored.resolved_at + timedelta(hours=12)

    def test_read_does_not_extend_resolved_game(self, service, make_game, db):
        game, items, participants = make_game()
        resolve(service, game, items, participants)
        before = load(db, game.id).expires_at
        run(service.get_game(game.id))
        run(service.list_items(game.id))
        assert load(db, game.id).expires_at == before

    def test_redetecting_resolution_is_noop(self, service, make_game, db):
        game, items, participants = make_game()
        resolve(service, game, items, participants)
        resolved_at = load(db, game.id).resolved_at
        run(service.confirm_bid(game.id, items[1].id, participants[1].id))
        assert load(db, game.id).resolved_at == resolved_at


class TestExpiredAccess:

    def test_expired_game_raises_gone(self, service, make_game, db):
        game, _, _ = make_game()
        db.query(Game).filter(Game.id == game.id).update({"expires_at": utcnow() - timedelta(seconds=1)})
        db.commit()

        with pytest.raises(GameExpired):
            run(service.get_game(game.id))
        assert load(db, game.id).status == GameStatus.EXPIRED

        with pytest.raises(GameExpired):
            run(service.reset_game(game.unique_id))

    def test_unknown_game(self, service):
        with pytest.raises(GameNotFound):
            run(service.get_game("no-such-code"))


class TestSweep:

    def test_sweep_hard_deletes_expired_games_regardless_of_status(self, service, make_game, db):
        active, _, _ = make_game()
        resolved, items, participants = make_game()
        resolve(service, resolved, items, participants)
        survivor, _, _ = make_game()

        past = utcnow() - timedelta(minutes=1)
        db.query(Game).filter(Game.id.in_([active.id, resolved.id])).update(
            {"expires_at": past}, synchronize_session=False
        )
        db.commit()

        deleted = LifecycleManager(GameRepository(db)).sweep_expired_games()
        assert sorted(deleted) == sorted([active.id, resolved.id])

        db.expire_all()
        assert [g.id for g in db.query(Game).all()] == [survivor.id]
        assert db.query(Bid).count() == 0
        assert {i.game_id for i in db.query(Item).all()} == {survivor.id}
        assert {p.game_id for p in db.query(Participant).all()} == {survivor.id}

    def test_sweep_respects_now(self, make_game, db):
        game, _, _ = make_game()
        manager = LifecycleManager(GameRepository(db))
        assert manager.sweep_expired_games(utcnow()) == []
        assert manager.sweep_expired_games(utcnow() + timedelta(hours=49)) == [game.id]

    def test_run_sweep_releases_locks(self, make_game, db, session_factory):
        game, _, _ = make_game()
        game_locks.get(game.id)
        db.query(Game).filter(Game.id == game.id).update({"expires_at": utcnow() - timedelta(seconds=1)})
        db.commit()

        assert run_sweep(session_factory) == 1
        assert game.id not in game_locks._locks


class TestLifecycleManager:

    def test_reopen_only_from_resolved(self, db, make_game):
        game, _, _ = make_game()
        manager = LifecycleManager(GameRepository(db))
        stored = load(db, game.id)
        assert manager.reopen(stored) is False
        assert manager.mark_resolved(stored) is True
        assert manager.mark_resolved(stored) is False
        assert manager.reopen(stored) is True
        assert stored.status == GameStatus.ACTIVE
        assert stored.resolved_at is None

    def test_touch_ignores_resolved(self, db, make_game):
        game, _, _ = make_game()
        manager = LifecycleManager(GameRepository(db))
        stored = load(db, game.id)
        now = utcnow()
        manager.mark_resolved(stored, now)
        manager.touch(stored, now + timedelta(hours=1))
        assert stored.expires_at == now + timedelta(hours=12)
        assert Decimal(stored.total_price) == Decimal("100")
