from tests.conftest import assign, utc_today


async def _start(client, headers, assignment_id):
    r = await client.post("/api/v1/sessions/start", json={"assignment_id": assignment_id}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


async def _log(client, headers, session, index, weight=50, reps=10, **extra):
    body = {"session_exercise_id": session["exercises"][index]["id"], "weight": weight, "reps": reps, **extra}
    r = await client.post(f"/api/v1/sessions/{session['id']}/sets", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


async def test_start_copies_plan_and_marks_assignment_started(client, athlete, circuit_assignment):
    _, headers = athlete
    session = await _start(client, headers, circuit_assignment["id"])
    assert session["status"] == "active"
    assert session["workout_name"] == "Circuit Day"
    assert [e["exercise_name"] for e in session["exercises"]] == ["Back Squat", "Push-up", "Row", "Plank"]
    assert session["exercises"][0]["weight_target"] == 100
    assert list(session["group_rounds"].values()) == [1]

    again = await _start(client, headers, circuit_assignment["id"])
    assert again["id"] == session["id"]

    r = await client.get(f"/api/v1/assignments/{circuit_assignment['id']}", headers=headers)
    assert r.json()["status"] == "started"


async def test_other_athlete_cannot_start_or_read(client, athlete, other_athlete, circuit_assignment):
    r = await client.post(
        "/api/v1/sessions/start", json={"assignment_id": circuit_assignment["id"]}, headers=other_athlete[1]
    )
    assert r.status_code == 404

    session = await _start(client, athlete[1], circuit_assignment["id"])
    r = await client.get(f"/api/v1/sessions/{session['id']}", headers=other_athlete[1])
    assert r.status_code == 404


async def test_full_session_walks_circuit_rounds(client, coach, athlete, circuit_assignment):
    _, headers = athlete
    session = await _start(client, headers, circuit_assignment["id"])
    group_id = session["exercises"][1]["group_id"]

    first = await _log(client, headers, session, 0, weight=100, reps=5)
    assert first["record"]["is_pr"] is True
    assert first["pr"]["type"] == "1rm"
    assert first["pr_message"].startswith("New 1RM PR!")
    assert first["current_exercise_index"] == 1

    assert (await _log(client, headers, session, 1))["current_exercise_index"] == 2
    end_of_round = await _log(client, headers, session, 2)
    assert end_of_round["current_exercise_index"] == 1
    assert end_of_round["round_reset_group_id"] == group_id
    assert end_of_round["group_rounds"] == {group_id: 2}

    second = await _log(client, headers, session, 1)
    assert second["current_exercise_index"] == 2
    assert second["record"]["set_number"] == 2
    assert second["record"]["is_pr"] is False
    assert (await _log(client, headers, session, 2))["current_exercise_index"] == 3
    last = await _log(client, headers, session, 3, weight=None, reps=60)
    assert last["workout_finished"] is True
    assert last["group_rounds"] == {group_id: 2}

    r = await client.post(f"/api/v1/sessions/{session['id']}/complete", headers=headers)
    assert r.status_code == 200, r.text
    summary = r.json()
    assert summary["session"]["status"] == "completed"
    assert summary["total_exercises"] == 4
    assert summary["total_completed_sets"] == 6
    assert summary["completion_percentage"] == 100

    r = await client.get(f"/api/v1/assignments/{circuit_assignment['id']}", headers=headers)
    assert r.json()["status"] == "completed"
    assert r.json()["completed_at"] is not None

    r = await client.post(f"/api/v1/sessions/{session['id']}/complete", headers=headers)
    assert r.status_code == 400

    # coach reads the athlete's session
    r = await client.get(f"/api/v1/sessions/{session['id']}", headers=coach[1])
    assert r.status_code == 200
    assert sum(len(e["set_records"]) for e in r.json()["exercises"]) == 6


async def test_pr_creates_notification(client, athlete, circuit_assignment):
    _, headers = athlete
    session = await _start(client, headers, circuit_assignment["id"])
    await _log(client, headers, session, 0, weight=100, reps=5)
    r = await client.get("/api/v1/notifications", params={"unread_only": True}, headers=headers)
    types = [n["type"] for n in r.json()["notifications"]]
    assert "pr" in types


async def test_batch_replay_is_idempotent(client, athlete, circuit_assignment):
    _, headers = athlete
    session = await _start(client, headers, circuit_assignment["id"])
    batch = {
        "sets": [
            {"session_exercise_id": session["exercises"][0]["id"], "weight": 80, "reps": 8, "client_id": "off-1"},
            {"session_exercise_id": session["exercises"][1]["id"], "reps": 12, "client_id": "off-2"},
        ]
    }
    r = await client.post(f"/api/v1/sessions/{session['id']}/sets/batch", json=batch, headers=headers)
    assert r.status_code == 200, r.text
    assert (r.json()["created"], r.json()["skipped"]) == (2, 0)

    r = await client.post(f"/api/v1/sessions/{session['id']}/sets/batch", json=batch, headers=headers)
    assert (r.json()["created"], r.json()["skipped"]) == (0, 2)

    r = await client.get(f"/api/v1/sessions/{session['id']}", headers=headers)
    exercises = r.json()["exercises"]
    assert [len(e["set_records"]) for e in exercises] == [1, 1, 0, 0]
    assert r.json()["current_exercise_index"] == 2


async def test_pause_resume_and_abandon(client, athlete, circuit_assignment):
    _, headers = athlete
    session = await _start(client, headers, circuit_assignment["id"])
    sid = session["id"]

    r = await client.post(f"/api/v1/sessions/{sid}/pause", headers=headers)
    assert r.json()["status"] == "paused"
    assert (await client.post(f"/api/v1/sessions/{sid}/pause", headers=headers)).status_code == 400
    r = await client.post(f"/api/v1/sessions/{sid}/resume", headers=headers)
    assert r.json()["status"] == "active"

    r = await client.post(f"/api/v1/sessions/{sid}/abandon", headers=headers)
    assert r.json()["status"] == "abandoned"
    r = await client.get(f"/api/v1/assignments/{circuit_assignment['id']}", headers=headers)
    assert r.json()["status"] in ("assigned", "overdue")

    body = {"session_exercise_id": session["exercises"][0]["id"], "weight": 50, "reps": 5}
    r = await client.post(f"/api/v1/sessions/{sid}/sets", json=body, headers=headers)
    assert r.status_code == 400


async def test_navigate_to_exercise(client, athlete, circuit_assignment):
    _, headers = athlete
    session = await _start(client, headers, circuit_assignment["id"])
    r = await client.patch(f"/api/v1/sessions/{session['id']}", json={"current_exercise_index": 3}, headers=headers)
    assert r.json()["current_exercise_index"] == 3
    r = await client.patch(f"/api/v1/sessions/{session['id']}", json={"current_exercise_index": 9}, headers=headers)
    assert r.status_code == 400


async def test_edit_and_delete_set(client, athlete, circuit_assignment):
    _, headers = athlete
    session = await _start(client, headers, circuit_assignment["id"])
    logged = await _log(client, headers, session, 0, weight=100, reps=5)
    set_id = logged["record"]["id"]

    r = await client.patch(f"/api/v1/sets/{set_id}", json={"reps": 6, "rpe": 8}, headers=headers)
    assert r.status_code == 200, r.text
    assert r.json()["reps"] == 6
    assert r.json()["rpe"] == 8
    assert r.json()["is_pr"] is True

    assert (await client.delete(f"/api/v1/sets/{set_id}", headers=headers)).status_code == 204
    r = await client.get(f"/api/v1/sessions/{session['id']}", headers=headers)
    assert r.json()["exercises"][0]["set_records"] == []
    assert r.json()["exercises"][0]["sets_completed"] == 0


async def test_feedback_after_completion_notifies_coach(client, coach, athlete, circuit_assignment):
    _, headers = athlete
    session = await _start(client, headers, circuit_assignment["id"])
    feedback = {"difficulty_rating": 7, "soreness_level": 4, "energy_level": 6, "enjoyed": True}

    r = await client.post(f"/api/v1/sessions/{session['id']}/feedback", json=feedback, headers=headers)
    assert r.status_code == 400

    await client.post(f"/api/v1/sessions/{session['id']}/complete", headers=headers)
    r = await client.post(f"/api/v1/sessions/{session['id']}/feedback", json=feedback, headers=headers)
    assert r.status_code == 201, r.text
    assert r.json()["difficulty_rating"] == 7

    r = await client.post(f"/api/v1/sessions/{session['id']}/feedback", json=feedback, headers=headers)
    assert r.status_code == 409

    r = await client.get("/api/v1/notifications", headers=coach[1])
    assert [n["type"] for n in r.json()["notifications"]] == ["feedback"]


async def test_history_lists_sessions(client, coach, athlete, circuit_assignment):
    _, headers = athlete
    session = await _start(client, headers, circuit_assignment["id"])
    r = await client.get("/api/v1/sessions", headers=headers)
    assert [s["id"] for s in r.json()] == [session["id"]]

    r = await client.get("/api/v1/sessions", params={"athlete_id": str(athlete[0].id)}, headers=coach[1])
    assert [s["id"] for s in r.json()] == [session["id"]]


async def test_client_id_is_scoped_to_its_session(client, coach, athlete, other_athlete, circuit_assignment):
    session = await _start(client, athlete[1], circuit_assignment["id"])
    first = await _log(client, athlete[1], session, 0, weight=100, reps=5, client_id="c-1", notes="private")
    again = await _log(client, athlete[1], session, 0, weight=100, reps=5, client_id="c-1")
    assert again["record"]["id"] == first["record"]["id"]

    rows = await assign(
        client, coach[1], circuit_assignment["workout_plan_id"], utc_today().isoformat(), athlete_id=other_athlete[0].id
    )
    other_session = await _start(client, other_athlete[1], rows[0]["id"])
    body = {"session_exercise_id": other_session["exercises"][0]["id"], "weight": 60, "reps": 5, "client_id": "c-1"}
    r = await client.post(f"/api/v1/sessions/{other_session['id']}/sets", json=body, headers=other_athlete[1])
    assert r.status_code == 409
    assert "private" not in r.text

    r = await client.post(
        f"/api/v1/sessions/{other_session['id']}/sets/batch", json={"sets": [body]}, headers=other_athlete[1]
    )
    assert r.status_code == 409


async def test_completion_counts_every_circuit_round(client, athlete, circuit_assignment):
    _, headers = athlete
    session = await _start(client, headers, circuit_assignment["id"])
    # an extra squat set beyond the target does not make up for the skipped plank
    for index in (0, 0, 1, 2, 1, 2):
        await _log(client, headers, session, index)

    r = await client.post(f"/api/v1/sessions/{session['id']}/complete", headers=headers)
    summary = r.json()
    assert summary["total_target_sets"] == 6
    assert summary["total_completed_sets"] == 5
    assert summary["completion_percentage"] == 83
    assert [a["type"] for a in summary["new_achievements"]] == ["first_workout", "first_pr"]


async def test_deleting_a_set_renumbers_later_sets(client, athlete, circuit_assignment):
    _, headers = athlete
    session = await _start(client, headers, circuit_assignment["id"])
    ids = [(await _log(client, headers, session, 0, reps=r))["record"]["id"] for r in (5, 6, 7)]

    assert (await client.delete(f"/api/v1/sets/{ids[1]}", headers=headers)).status_code == 204
    r = await client.get(f"/api/v1/sessions/{session['id']}", headers=headers)
    numbers = {s["id"]: s["set_number"] for s in r.json()["exercises"][0]["set_records"]}
    assert numbers == {ids[0]: 1, ids[2]: 2}

    assert (await _log(client, headers, session, 0))["record"]["set_number"] == 3


async def test_deleting_the_last_set_moves_the_session_back(client, athlete, circuit_assignment):
    _, headers = athlete
    session = await _start(client, headers, circuit_assignment["id"])
    logged = await _log(client, headers, session, 0)
    assert logged["current_exercise_index"] == 1

    assert (await client.delete(f"/api/v1/sets/{logged['record']['id']}", headers=headers)).status_code == 204
    r = await client.get(f"/api/v1/sessions/{session['id']}", headers=headers)
    body = r.json()
    assert body["current_exercise_index"] == 0
    assert body["exercises"][0]["sets_completed"] == 0
    assert body["exercises"][0]["completed"] is False
