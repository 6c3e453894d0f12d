import importlib.util
from pathlib import Path

from litework.core.config import get_settings
from litework.main import app

ROOT = Path(__file__).resolve().parent.parent


def _load_script(name):
    module_spec = importlib.util.spec_from_file_location(name, ROOT / "scripts" / f"{name}.py")
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


async def test_health(client):
    r = await client.get("/api/v1/health")
    assert r.json()["status"] == "ok"
    r = await client.get("/api/v1/health/ready")
    assert r.json() == {"status": "ok", "database": "connected"}


async def test_cron_requires_secret(client, coach):
    r = await client.get("/api/v1/cron/workout-reminders")
    assert r.status_code == 401
    # a user token is not the cron secret
    r = await client.get("/api/v1/cron/workout-reminders", headers=coach[1])
    assert r.status_code == 401


async def test_cron_runs_reminders(client):
    headers = {"Authorization": f"Bearer {get_settings().cron_secret}"}
    r = await client.get("/api/v1/cron/workout-reminders", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["sent"] == 0
    assert "ran_at" in body


async def test_cron_disabled_without_secret(client, monkeypatch):
    monkeypatch.setattr(get_settings(), "cron_secret", "")
    r = await client.get("/api/v1/cron/workout-reminders", headers={"Authorization": "Bearer anything"})
    assert r.status_code == 503


def test_every_private_route_requires_auth():
    audit = _load_script("audit_api_security")
    assert audit.audit(app) == []
