"""Shared fixtures: in-memory SQLite per test, API client with get_db overridden, users with tokens."""

import os

# Must be set before litework reads its settings
os.environ["DATABASE_DSN"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["CRON_SECRET"] = "test-cron-secret"
os.environ["SMTP_HOST"] = ""

from datetime import timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from litework.core.dates import utcnow
from litework.core.enums import SessionStatus, UserRole
from litework.core.security import generate_token, hash_password, hash_token, token_expiry
from litework.db.base import Base
from litework.db.session import get_db
from litework.main import app
from litework.models.exercise import Exercise
from litework.models.user import AuthToken, User
from litework.models.workout_session import SessionExercise, SetRecord, WorkoutSession

PASSWORD = "password123"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def utc_today():
    return utcnow().date()


async def create_user(session_maker, email, role=UserRole.ATHLETE, first_name="Test", last_name="User", **extra):
    """Insert a user with a live token. Returns (user, auth headers)."""
    async with session_maker() as s:
        user = User(
            email=email,
            password_hash=hash_password(PASSWORD),
            first_name=first_name,
            last_name=last_name,
            role=role,
            **extra,
        )
        s.add(user)
        await s.flush()
        raw_token = generate_token()
        s.add(AuthToken(token_hash=hash_token(raw_token), user_id=user.id, expires_at=token_expiry()))
        await s.commit()
        return user, {"Authorization": f"Bearer {raw_token}"}


@pytest.fixture
async def coach(session_maker):
    return await create_user(session_maker, "coach@example.com", UserRole.COACH, "Casey", "Coach")


@pytest.fixture
async def athlete(session_maker, coach):
    return await create_user(
        session_maker, "athlete@example.com", UserRole.ATHLETE, "Avery", "Athlete", coach_id=coach[0].id
    )


@pytest.fixture
async def other_athlete(session_maker, coach):
    return await create_user(
        session_maker, "other@example.com", UserRole.ATHLETE, "Olli", "Other", coach_id=coach[0].id
    )


async def create_exercise(client, headers, name, category="strength"):
    r = await client.post("/api/v1/exercises", json={"name": name, "category": category}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


async def create_plan(client, headers, name="Plan", exercises=None, groups=None):
    body = {"name": name, "exercises": exercises or [], "groups": groups or []}
    r = await client.post("/api/v1/workouts", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


async def assign(client, headers, plan_id, scheduled_date, athlete_id=None, group_id=None, **extra):
    body = {"workout_plan_id": plan_id, "scheduled_date": scheduled_date, **extra}
    if athlete_id:
        body["athlete_id"] = str(athlete_id)
    if group_id:
        body["group_id"] = str(group_id)
    r = await client.post("/api/v1/assignments", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


async def insert_exercise(session_maker, name="Deadlift"):
    async with session_maker() as s:
        exercise = Exercise(name=name)
        s.add(exercise)
        await s.commit()
        return exercise


async def insert_completed_session(session_maker, athlete_id, days_ago, sets=(), exercise=None):
    """Insert a completed session ``days_ago`` days back, with optional (weight, reps, is_pr) sets."""
    when = utcnow() - timedelta(days=days_ago)
    async with session_maker() as s:
        session = WorkoutSession(
            athlete_id=athlete_id,
            workout_name="Logged",
            status=SessionStatus.COMPLETED,
            started_at=when,
            completed_at=when,
            total_duration_seconds=1800,
        )
        if exercise is not None:
            session.exercises = [
                SessionExercise(
                    exercise_id=exercise.id,
                    exercise_name=exercise.name,
                    sets_target=len(sets),
                    sets_completed=len(sets),
                    set_records=[
                        SetRecord(set_number=i + 1, weight=w, reps=r, is_pr=pr, completed_at=when)
                        for i, (w, r, pr) in enumerate(sets)
                    ],
                )
            ]
        s.add(session)
        await s.commit()


@pytest.fixture
async def circuit_assignment(client, coach, athlete):
    """Plan: Squat, then a 2-round circuit of Push-up + Row, then Plank. One set each."""
    _, headers = coach
    ids = [
        (await create_exercise(client, headers, name))["id"]
        for name in ("Back Squat", "Push-up", "Row", "Plank")
    ]
    plan = await create_plan(
        client,
        headers,
        name="Circuit Day",
        groups=[{"key": "c1", "name": "Circuit", "type": "circuit", "rounds": 2}],
        exercises=[
            {"exercise_id": ids[0], "sets": 1, "reps": "5", "weight": 100},
            {"exercise_id": ids[1], "sets": 1, "group_key": "c1"},
            {"exercise_id": ids[2], "sets": 1, "group_key": "c1"},
            {"exercise_id": ids[3], "sets": 1},
        ],
    )
    rows = await assign(client, headers, plan["id"], utc_today().isoformat(), athlete_id=athlete[0].id)
    return rows[0]
