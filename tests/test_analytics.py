from tests.conftest import (
    assign,
    create_exercise,
    create_plan,
    insert_completed_session,
    insert_exercise,
    utc_today,
)


async def test_streak_counts_consecutive_days(client, session_maker, athlete):
    athlete_user, headers = athlete
    for days_ago in (0, 1, 2, 5):
        await insert_completed_session(session_maker, athlete_user.id, days_ago)

    r = await client.get("/api/v1/analytics/streak", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["current_streak"] == 3
    assert body["longest_streak"] == 3
    assert body["last_workout_date"] == utc_today().isoformat()


async def test_athlete_cannot_read_another_athletes_stats(client, athlete, other_athlete):
    r = await client.get(
        "/api/v1/analytics/streak", params={"athlete_id": str(other_athlete[0].id)}, headers=athlete[1]
    )
    assert r.status_code == 403


async def test_check_pr_without_history(client, session_maker, athlete):
    exercise = await insert_exercise(session_maker)
    body = {"exercise_id": str(exercise.id), "weight": 140, "reps": 3}
    r = await client.post("/api/v1/analytics/check-pr", json=body, headers=athlete[1])
    assert r.status_code == 200
    result = r.json()
    assert result["is_pr"] is True
    assert result["type"] == "1rm"
    assert result["badge"] == "legendary"


async def test_check_pr_against_history(client, session_maker, athlete):
    exercise = await insert_exercise(session_maker)
    await insert_completed_session(session_maker, athlete[0].id, 3, sets=[(100, 10, True)], exercise=exercise)

    body = {"exercise_id": str(exercise.id), "weight": 100, "reps": 10}
    r = await client.post("/api/v1/analytics/check-pr", json=body, headers=athlete[1])
    assert r.json()["is_pr"] is False
    assert r.json()["message"] is None

    body = {"exercise_id": str(exercise.id), "weight": 90, "reps": 11}
    r = await client.post("/api/v1/analytics/check-pr", json=body, headers=athlete[1])
    assert r.json()["type"] == "reps"


async def test_one_rm_history_keeps_best_per_day(client, session_maker, athlete):
    exercise = await insert_exercise(session_maker)
    await insert_completed_session(
        session_maker, athlete[0].id, 2, sets=[(100, 5, True), (110, 1, False)], exercise=exercise
    )
    await insert_completed_session(session_maker, athlete[0].id, 1, sets=[(102, 5, True)], exercise=exercise)

    r = await client.get("/api/v1/analytics/1rm-history", params={"exercise_id": str(exercise.id)}, headers=athlete[1])
    points = r.json()["points"]
    assert [p["estimated_1rm"] for p in points] == [117, 119]
    assert points[0]["weight"] == 100


async def test_personal_records_and_volume(client, session_maker, athlete):
    exercise = await insert_exercise(session_maker, "Bench Press")
    await insert_completed_session(
        session_maker, athlete[0].id, 0, sets=[(60, 10, True), (70, 5, False)], exercise=exercise
    )

    r = await client.get("/api/v1/analytics/personal-records", headers=athlete[1])
    body = r.json()
    assert [rec["exercise_name"] for rec in body["records"]] == ["Bench Press"]
    assert body["records"][0]["weight"] == 70
    assert len(body["recent_prs"]) == 1

    r = await client.get("/api/v1/analytics/volume-history", headers=athlete[1])
    assert r.json()["total_volume"] == 950


async def test_dashboard_views(client, session_maker, coach, athlete):
    await insert_completed_session(session_maker, athlete[0].id, 0)

    r = await client.get("/api/v1/analytics/dashboard-stats", headers=coach[1])
    assert r.json()["role"] == "coach"
    assert r.json()["total_athletes"] == 1
    assert r.json()["workouts_completed_this_week"] == 1

    r = await client.get("/api/v1/analytics/dashboard-stats", headers=athlete[1])
    assert r.json()["role"] == "athlete"
    assert r.json()["total_workouts"] == 1
    assert r.json()["current_streak"] == 1


async def test_workout_feed(client, session_maker, coach, athlete, other_athlete):
    await insert_completed_session(session_maker, athlete[0].id, 1)
    await insert_completed_session(session_maker, other_athlete[0].id, 0)

    r = await client.get("/api/v1/workout-feed", headers=coach[1])
    assert [i["athlete_name"] for i in r.json()["items"]] == ["Olli Other", "Avery Athlete"]

    r = await client.get("/api/v1/workout-feed", headers=athlete[1])
    assert r.json()["count"] == 1


async def test_kpi_drives_percentage_targets_and_tracks_prs(client, coach, athlete):
    _, headers = coach
    squat = await create_exercise(client, headers, "Back Squat")
    r = await client.post(
        "/api/v1/kpis",
        json={"athlete_id": str(athlete[0].id), "exercise_id": squat["id"], "current_pr": 150},
        headers=headers,
    )
    assert r.status_code == 201, r.text
    kpi = r.json()
    assert kpi["exercise_name"] == "Back Squat"

    r = await client.post(
        "/api/v1/kpis", json={"athlete_id": str(athlete[0].id), "exercise_id": squat["id"]}, headers=headers
    )
    assert r.status_code == 409

    plan = await create_plan(
        client,
        headers,
        exercises=[{"exercise_id": squat["id"], "sets": 1, "weight_type": "percentage", "percentage": 75}],
    )
    rows = await assign(client, headers, plan["id"], utc_today().isoformat(), athlete_id=athlete[0].id)
    r = await client.post("/api/v1/sessions/start", json={"assignment_id": rows[0]["id"]}, headers=athlete[1])
    session = r.json()
    assert session["exercises"][0]["weight_target"] == 112.5

    body = {"session_exercise_id": session["exercises"][0]["id"], "weight": 160, "reps": 3}
    await client.post(f"/api/v1/sessions/{session['id']}/sets", json=body, headers=athlete[1])

    r = await client.get("/api/v1/kpis", headers=athlete[1])
    assert r.json()[0]["current_pr"] == 176
