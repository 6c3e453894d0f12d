from tests.conftest import assign, create_exercise, create_plan, utc_today


async def test_exercise_library(client, coach, athlete):
    _, headers = coach
    squat = await create_exercise(client, headers, "Back Squat")
    await create_exercise(client, headers, "Bench Press")

    r = await client.post("/api/v1/exercises", json={"name": "back squat"}, headers=headers)
    assert r.status_code == 409

    r = await client.post("/api/v1/exercises/find-or-create", json={"name": "Back Squat"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["id"] == squat["id"]

    _, athlete_headers = athlete
    r = await client.get("/api/v1/exercises", params={"q": "squat"}, headers=athlete_headers)
    assert [e["name"] for e in r.json()] == ["Back Squat"]


async def test_exercise_in_use_cannot_be_deleted(client, coach):
    _, headers = coach
    squat = await create_exercise(client, headers, "Back Squat")
    await create_plan(client, headers, exercises=[{"exercise_id": squat["id"]}])
    r = await client.delete(f"/api/v1/exercises/{squat['id']}", headers=headers)
    assert r.status_code == 409


async def test_create_plan_with_groups(client, coach):
    _, headers = coach
    squat = await create_exercise(client, headers, "Back Squat")
    pushup = await create_exercise(client, headers, "Push-up")
    row = await create_exercise(client, headers, "Row")
    plan = await create_plan(
        client,
        headers,
        name="Full Body",
        groups=[{"key": "c1", "name": "Finisher", "type": "circuit", "rounds": 3}],
        exercises=[
            {"exercise_id": squat["id"], "sets": 5, "reps": "5", "weight": 100},
            {"exercise_id": pushup["id"], "group_key": "c1", "reps": "15"},
            {"exercise_id": row["id"], "group_key": "c1", "reps": "12"},
        ],
    )
    assert len(plan["groups"]) == 1
    group_id = plan["groups"][0]["id"]
    assert [e["group_id"] for e in plan["exercises"]] == [None, group_id, group_id]
    assert [e["order_index"] for e in plan["exercises"]] == [0, 1, 2]
    assert plan["exercises"][0]["exercise"]["name"] == "Back Squat"


async def test_unknown_group_key_is_rejected(client, coach):
    _, headers = coach
    squat = await create_exercise(client, headers, "Back Squat")
    body = {"name": "Bad", "exercises": [{"exercise_id": squat["id"], "group_key": "nope"}]}
    r = await client.post("/api/v1/workouts", json=body, headers=headers)
    assert r.status_code == 422


async def test_replace_plan(client, coach):
    _, headers = coach
    squat = await create_exercise(client, headers, "Back Squat")
    bench = await create_exercise(client, headers, "Bench Press")
    plan = await create_plan(client, headers, exercises=[{"exercise_id": squat["id"]}])

    body = {"name": "Upper", "exercises": [{"exercise_id": bench["id"], "sets": 4}]}
    r = await client.put(f"/api/v1/workouts/{plan['id']}", json=body, headers=headers)
    assert r.status_code == 200
    updated = r.json()
    assert updated["name"] == "Upper"
    assert [e["exercise_id"] for e in updated["exercises"]] == [bench["id"]]
    assert updated["exercises"][0]["sets"] == 4


async def test_archived_plans_hidden_by_default(client, coach):
    _, headers = coach
    plan = await create_plan(client, headers, name="Old Plan")
    await create_plan(client, headers, name="New Plan")
    r = await client.post(f"/api/v1/workouts/{plan['id']}/archive", headers=headers)
    assert r.json()["archived"] is True

    r = await client.get("/api/v1/workouts", headers=headers)
    assert [p["name"] for p in r.json()] == ["New Plan"]
    r = await client.get("/api/v1/workouts", params={"only_archived": True}, headers=headers)
    assert [p["name"] for p in r.json()] == ["Old Plan"]


async def test_athlete_sees_only_assigned_plans(client, coach, athlete):
    coach_user, headers = coach
    athlete_user, athlete_headers = athlete
    plan = await create_plan(client, headers)
    r = await client.get(f"/api/v1/workouts/{plan['id']}", headers=athlete_headers)
    assert r.status_code == 404

    await assign(client, headers, plan["id"], utc_today().isoformat(), athlete_id=athlete_user.id)
    r = await client.get(f"/api/v1/workouts/{plan['id']}", headers=athlete_headers)
    assert r.status_code == 200


async def test_insert_block_appends_after_existing(client, coach):
    _, headers = coach
    squat = await create_exercise(client, headers, "Back Squat")
    lunge = await create_exercise(client, headers, "Lunge")
    plank = await create_exercise(client, headers, "Plank")
    block = {
        "name": "Core Finisher",
        "category": "accessory",
        "groups": [{"key": "ss", "name": "Superset", "type": "superset", "rounds": 2}],
        "exercises": [
            {"exercise_id": lunge["id"], "group_key": "ss"},
            {"exercise_id": plank["id"], "group_key": "ss"},
        ],
    }
    r = await client.post("/api/v1/blocks", json=block, headers=headers)
    assert r.status_code == 201, r.text
    block_id = r.json()["id"]

    plan = await create_plan(client, headers, exercises=[{"exercise_id": squat["id"]}])
    r = await client.post(f"/api/v1/workouts/{plan['id']}/blocks/{block_id}", headers=headers)
    assert r.status_code == 200, r.text
    exercises = r.json()["exercises"]
    assert [e["exercise_id"] for e in exercises] == [squat["id"], lunge["id"], plank["id"]]
    assert [e["order_index"] for e in exercises] == [0, 1, 2]
    assert exercises[1]["group_id"] == exercises[2]["group_id"] is not None

    r = await client.get(f"/api/v1/blocks/{block_id}", headers=headers)
    assert r.json()["usage_count"] == 1
