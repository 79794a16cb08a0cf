"""测试公共fixture：内存SQLite数据库、服务实例和HTTP客户端"""

import asyncio
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import fairsplit.models  # noqa: F401
from fairsplit.core.database import Base, get_db
from fairsplit.core.locks import GameLocks
from fairsplit.schemas.game_schemas import GameCreate, ItemCreate, ParticipantCreate
from fairsplit.services.game_service import GameService


def run(coro):
    """在新的事件循环中执行服务协程"""
    return asyncio.run(coro)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def service(db):
    return GameService(db, locks=GameLocks())


@pytest.fixture
def make_game(service):
    """创建游戏并让参与者加入，返回 (game, items, participants)"""

    def _make(total="100", titles=("A", "B"), names=("P1", "P2")):
        game = run(service.create_game(GameCreate(
            title="合租分房",
            total_price=Decimal(total),
            items=[ItemCreate(title=t) for t in titles],
        )))
        participants = [run(service.join_game(game.id, ParticipantCreate(name=n))) for n in names]
        items = run(service.list_items(game.id))
        return game, items, participants

    return _make


@pytest.fixture
def client(session_factory):
    from main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
