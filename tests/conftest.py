"""공통 테스트 픽스처 (임시 SQLite DB + 인프로세스 ASGI 클라이언트)"""
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.main import app
from app.models import Base, GameSession, Group, Profile, Quiz, Report
from app.models.base import get_db



@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """테스트마다 새로 만드는 SQLite 엔진"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine):
    return async_sessionmaker(test_engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def test_db_session(session_factory):
    """데이터 준비/검증용 세션"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """get_db를 테스트 DB로 바꾼 비동기 클라이언트"""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def new_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def make_profile(test_db_session):
    """사용자 생성 팩토리"""

    async def factory(**values) -> Profile:
        values.setdefault("id", new_id())
        values.setdefault("username", f"user-{values['id'][:8]}")
        values.setdefault("email", f"{values['username']}@example.com")
        profile = Profile(**values)
        test_db_session.add(profile)
        await test_db_session.commit()
        return profile

    return factory


@pytest.fixture
def make_quiz(test_db_session):
    """퀴즈 생성 팩토리"""

    async def factory(**values) -> Quiz:
        values.setdefault("id", new_id())
        values.setdefault("title", "General Knowledge")
        values.setdefault("questions", [])
        quiz = Quiz(**values)
        test_db_session.add(quiz)
        await test_db_session.commit()
        return quiz

    return factory


@pytest.fixture
def make_game_session(test_db_session):
    """게임 세션 생성 팩토리"""

    async def factory(**values) -> GameSession:
        values.setdefault("id", new_id())
        values.setdefault("game_pin", str(uuid.uuid4().int)[:6])
        values.setdefault("participants", [])
        row = GameSession(**values)
        test_db_session.add(row)
        await test_db_session.commit()
        return row

    return factory


@pytest.fixture
def make_group(test_db_session):
    """그룹 생성 팩토리"""

    async def factory(**values) -> Group:
        values.setdefault("id", new_id())
        values.setdefault("name", "Study Group")
        values.setdefault("members", [])
        values.setdefault("settings", {"status": "public"})
        group = Group(**values)
        test_db_session.add(group)
        await test_db_session.commit()
        return group

    return factory


@pytest.fixture
def make_report(test_db_session):
    """신고 생성 팩토리"""

    async def factory(**values) -> Report:
        values.setdefault("id", new_id())
        values.setdefault("title", "Inappropriate content")
        values.setdefault("messages", [])
        report = Report(**values)
        test_db_session.add(report)
        await test_db_session.commit()
        return report

    return factory
