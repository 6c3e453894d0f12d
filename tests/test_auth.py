from sqlalchemy import select

from litework.api.v1.endpoints import auth as auth_endpoints
from litework.api.v1.endpoints import invites as invite_endpoints
from litework.core.security import hash_token
from litework.models.user import AuthToken
from tests.conftest import PASSWORD


async def test_login_normalizes_email_and_returns_token(client, coach):
    r = await client.post("/api/v1/auth/login", json={"email": "  Coach@Example.com ", "password": PASSWORD})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["role"] == "coach"
    assert body["user"]["full_name"] == "Casey Coach"

    me = await client.get("/api/v1/profile", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "coach@example.com"


async def test_login_rejects_bad_password(client, coach):
    r = await client.post("/api/v1/auth/login", json={"email": "coach@example.com", "password": "nope"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid email or password"


async def test_missing_or_unknown_token(client):
    r = await client.get("/api/v1/profile")
    assert r.status_code == 401
    assert r.headers["www-authenticate"] == "Bearer"
    assert r.json()["error"] == "Unauthorized"

    r = await client.get("/api/v1/profile", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401


async def test_logout_revokes_token(client, athlete):
    _, headers = athlete
    assert (await client.post("/api/v1/auth/logout", headers=headers)).status_code == 204
    assert (await client.get("/api/v1/profile", headers=headers)).status_code == 401


async def test_athlete_cannot_use_coach_routes(client, athlete):
    _, headers = athlete
    r = await client.post("/api/v1/workouts", json={"name": "Mine"}, headers=headers)
    assert r.status_code == 403
    assert r.json()["error"] == "Forbidden"
    r = await client.get("/api/v1/athletes", headers=headers)
    assert r.status_code == 403


async def test_update_profile(client, athlete):
    _, headers = athlete
    r = await client.patch("/api/v1/profile", json={"first_name": "Ava", "injury_status": "Sore knee"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["first_name"] == "Ava"
    assert r.json()["injury_status"] == "Sore knee"


async def test_notification_preferences_defaults_and_update(client, athlete):
    _, headers = athlete
    r = await client.get("/api/v1/profile/notification-preferences", headers=headers)
    assert r.status_code == 200
    assert r.json()["workoutReminders"] == {"enabled": True, "timing": "smart", "channels": ["email"]}

    new = {"workoutReminders": {"enabled": False, "timing": "1hour", "channels": []}}
    r = await client.put("/api/v1/profile/notification-preferences", json=new, headers=headers)
    assert r.status_code == 200

    r = await client.get("/api/v1/profile/notification-preferences", headers=headers)
    assert r.json()["workoutReminders"] == new["workoutReminders"]
    assert r.json()["assignmentNotifications"]["enabled"] is True


async def test_coach_lists_and_edits_athletes(client, coach, athlete, other_athlete):
    _, headers = coach
    r = await client.get("/api/v1/athletes", headers=headers)
    assert r.status_code == 200
    assert {a["email"] for a in r.json()} == {"athlete@example.com", "other@example.com"}

    r = await client.get("/api/v1/athletes", params={"q": "olli"}, headers=headers)
    assert [a["email"] for a in r.json()] == ["other@example.com"]

    athlete_id = athlete[0].id
    r = await client.patch(f"/api/v1/athletes/{athlete_id}", json={"injury_status": "Cleared"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["injury_status"] == "Cleared"


async def test_tokens_are_stored_hashed(client, session_maker, coach):
    r = await client.post("/api/v1/auth/login", json={"email": "coach@example.com", "password": PASSWORD})
    access_token = r.json()["access_token"]

    async with session_maker() as s:
        stored = (await s.execute(select(AuthToken.token_hash).where(AuthToken.user_id == coach[0].id))).scalars().all()
    assert hash_token(access_token) in stored
    assert access_token not in stored


def _record_threadpool_calls(monkeypatch, module):
    calls = []

    async def run_inline(func, *args):
        calls.append(func.__name__)
        return func(*args)

    monkeypatch.setattr(module, "run_in_threadpool", run_inline)
    return calls


async def test_password_hashing_runs_off_the_event_loop(client, monkeypatch, coach):
    calls = _record_threadpool_calls(monkeypatch, auth_endpoints)
    r = await client.post("/api/v1/auth/login", json={"email": "coach@example.com", "password": PASSWORD})
    assert r.status_code == 200
    assert calls == ["verify_password"]

    invite = await client.post(
        "/api/v1/invites", json={"email": "thread@example.com", "first_name": "T"}, headers=coach[1]
    )
    calls = _record_threadpool_calls(monkeypatch, invite_endpoints)
    r = await client.post("/api/v1/invites/accept", json={"invite_id": invite.json()["id"], "password": "long-enough"})
    assert r.status_code == 201
    assert calls == ["hash_password"]
