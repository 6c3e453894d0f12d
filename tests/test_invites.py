import uuid


async def test_invite_accept_creates_athlete_and_signs_in(client, coach):
    coach_user, headers = coach
    group = await client.post("/api/v1/groups", json={"name": "Rowers", "sport": "Rowing"}, headers=headers)
    group_id = group.json()["id"]

    r = await client.post(
        "/api/v1/invites",
        json={"email": "New.Athlete@Example.com", "first_name": "Nia", "group_id": group_id},
        headers=headers,
    )
    assert r.status_code == 201, r.text
    invite = r.json()
    assert invite["email"] == "new.athlete@example.com"
    assert invite["status"] == "pending"

    r = await client.post("/api/v1/invites/accept", json={"invite_id": invite["id"], "password": "s3cret-pass"})
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["user"]["role"] == "athlete"
    assert body["user"]["coach_id"] == str(coach_user.id)

    me = await client.get("/api/v1/profile", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.json()["first_name"] == "Nia"

    r = await client.get(f"/api/v1/groups/{group_id}", headers=headers)
    assert r.json()["athlete_ids"] == [body["user"]["id"]]

    r = await client.post("/api/v1/invites/accept", json={"invite_id": invite["id"], "password": "s3cret-pass"})
    assert r.status_code == 404


async def test_duplicate_invites_are_rejected(client, coach, athlete):
    _, headers = coach
    r = await client.post("/api/v1/invites", json={"email": "athlete@example.com", "first_name": "A"}, headers=headers)
    assert r.status_code == 409

    body = {"email": "fresh@example.com", "first_name": "F"}
    assert (await client.post("/api/v1/invites", json=body, headers=headers)).status_code == 201
    assert (await client.post("/api/v1/invites", json=body, headers=headers)).status_code == 409


async def test_cancelled_invite_cannot_be_accepted(client, coach):
    _, headers = coach
    r = await client.post("/api/v1/invites", json={"email": "gone@example.com", "first_name": "G"}, headers=headers)
    invite_id = r.json()["id"]
    assert (await client.delete(f"/api/v1/invites/{invite_id}", headers=headers)).status_code == 204

    r = await client.get("/api/v1/invites", headers=headers)
    assert r.json() == []

    r = await client.post("/api/v1/invites/accept", json={"invite_id": invite_id, "password": "long-enough"})
    assert r.status_code == 404


async def test_accept_unknown_invite(client):
    r = await client.post("/api/v1/invites/accept", json={"invite_id": str(uuid.uuid4()), "password": "long-enough"})
    assert r.status_code == 404
    r = await client.post("/api/v1/invites/accept", json={"invite_id": str(uuid.uuid4()), "password": "short"})
    assert r.status_code == 422
