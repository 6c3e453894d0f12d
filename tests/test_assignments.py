from datetime import timedelta

from tests.conftest import assign, create_plan, utc_today


async def _group(client, headers, *athletes):
    body = {"name": "Sprinters", "sport": "Track", "athlete_ids": [str(a.id) for a in athletes]}
    r = await client.post("/api/v1/groups", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


async def test_group_membership(client, coach, athlete, other_athlete):
    _, headers = coach
    group = await _group(client, headers, athlete[0])
    assert group["athlete_ids"] == [str(athlete[0].id)]

    r = await client.post(
        f"/api/v1/groups/{group['id']}/members", json={"athlete_ids": [str(other_athlete[0].id)]}, headers=headers
    )
    assert sorted(r.json()["athlete_ids"]) == sorted([str(athlete[0].id), str(other_athlete[0].id)])

    r = await client.delete(f"/api/v1/groups/{group['id']}/members/{athlete[0].id}", headers=headers)
    assert r.json()["athlete_ids"] == [str(other_athlete[0].id)]

    # athletes only see their own groups
    r = await client.get("/api/v1/groups", headers=athlete[1])
    assert r.json() == []
    r = await client.get("/api/v1/groups", headers=other_athlete[1])
    assert [g["id"] for g in r.json()] == [group["id"]]


async def test_group_assignment_fans_out_per_athlete(client, coach, athlete, other_athlete):
    _, headers = coach
    group = await _group(client, headers, athlete[0], other_athlete[0])
    plan = await create_plan(client, headers, name="Speed Day")
    day = (utc_today() + timedelta(days=3)).isoformat()

    rows = await assign(client, headers, plan["id"], day, group_id=group["id"], start_time="15:30")
    assert len(rows) == 2
    assert {r["athlete_id"] for r in rows} == {str(athlete[0].id), str(other_athlete[0].id)}
    assert all(r["group_id"] == group["id"] for r in rows)
    assert all(r["workout_name"] == "Speed Day" for r in rows)
    assert rows[0]["scheduled_date"].startswith(f"{day}T15:30")

    r = await client.get("/api/v1/assignments", headers=athlete[1])
    assert [a["athlete_id"] for a in r.json()] == [str(athlete[0].id)]

    r = await client.get("/api/v1/notifications", headers=athlete[1])
    assert r.json()["unread_count"] == 1
    assert r.json()["notifications"][0]["type"] == "assignment"


async def test_assignment_needs_exactly_one_target(client, coach, athlete):
    _, headers = coach
    plan = await create_plan(client, headers)
    body = {"workout_plan_id": plan["id"], "scheduled_date": utc_today().isoformat()}
    r = await client.post("/api/v1/assignments", json=body, headers=headers)
    assert r.status_code == 422


async def test_reschedule_moves_group_together(client, coach, athlete, other_athlete):
    _, headers = coach
    group = await _group(client, headers, athlete[0], other_athlete[0])
    plan = await create_plan(client, headers)
    day = utc_today() + timedelta(days=1)
    rows = await assign(client, headers, plan["id"], day.isoformat(), group_id=group["id"], start_time="07:00")

    new_day = (day + timedelta(days=2)).isoformat()
    body = {"assignment_id": rows[0]["id"], "new_date": new_day, "move_group": True}
    r = await client.patch("/api/v1/assignments/reschedule", json=body, headers=headers)
    assert r.status_code == 200, r.text
    assert len(r.json()) == 2

    # without move_group only the one row moves
    later = (day + timedelta(days=4)).isoformat()
    body = {"assignment_id": rows[1]["id"], "new_date": later}
    r = await client.patch("/api/v1/assignments/reschedule", json=body, headers=headers)
    assert [a["id"] for a in r.json()] == [rows[1]["id"]]

    r = await client.get("/api/v1/assignments", params={"date": new_day}, headers=headers)
    assert [a["id"] for a in r.json()] == [rows[0]["id"]]
    assert r.json()[0]["scheduled_date"].startswith(f"{new_day}T07:00")


async def test_past_pending_assignment_reads_as_overdue(client, coach, athlete):
    _, headers = coach
    plan = await create_plan(client, headers)
    yesterday = (utc_today() - timedelta(days=1)).isoformat()
    rows = await assign(client, headers, plan["id"], yesterday, athlete_id=athlete[0].id)
    assert rows[0]["status"] == "overdue"


async def test_bulk_create_and_delete(client, coach, athlete, other_athlete):
    _, headers = coach
    plan = await create_plan(client, headers)
    day = utc_today().isoformat()
    body = {
        "assignments": [
            {"workout_plan_id": plan["id"], "athlete_id": str(athlete[0].id), "scheduled_date": day},
            {"workout_plan_id": plan["id"], "athlete_id": str(other_athlete[0].id), "scheduled_date": day},
        ]
    }
    r = await client.post("/api/v1/assignments/bulk", json=body, headers=headers)
    assert r.status_code == 201
    ids = [a["id"] for a in r.json()]

    r = await client.request("DELETE", "/api/v1/assignments/bulk", json={"assignment_ids": ids}, headers=headers)
    assert r.status_code == 200
    r = await client.get("/api/v1/assignments", headers=headers)
    assert r.json() == []


async def test_mark_notifications_read(client, coach, athlete):
    _, headers = coach
    plan = await create_plan(client, headers)
    for offset in (1, 2):
        day = (utc_today() + timedelta(days=offset)).isoformat()
        await assign(client, headers, plan["id"], day, athlete_id=athlete[0].id)

    r = await client.get("/api/v1/notifications", headers=athlete[1])
    first_id = r.json()["notifications"][0]["id"]
    r = await client.post(f"/api/v1/notifications/{first_id}/read", headers=athlete[1])
    assert r.json()["read"] is True
    assert (await client.get("/api/v1/notifications", headers=athlete[1])).json()["unread_count"] == 1

    # not visible to anyone else
    assert (await client.post(f"/api/v1/notifications/{first_id}/read", headers=headers)).status_code == 404

    r = await client.post("/api/v1/notifications/read-all", headers=athlete[1])
    assert r.json() == {"updated": 1}
    assert (await client.get("/api/v1/notifications", headers=athlete[1])).json()["unread_count"] == 0
