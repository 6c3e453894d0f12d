from litework.core.enums import AchievementType
from litework.services.achievements import ACHIEVEMENTS, AthleteTotals, milestones_reached
from tests.conftest import insert_completed_session, insert_exercise


def test_no_activity_earns_nothing():
    assert milestones_reached(AthleteTotals()) == []


def test_milestones_follow_thresholds():
    totals = AthleteTotals(completed_workouts=12, prs=0, current_streak=7, total_volume=52_000, total_sets=99)
    assert milestones_reached(totals) == [
        AchievementType.FIRST_WORKOUT,
        AchievementType.STREAK_3,
        AchievementType.STREAK_7,
        AchievementType.VOLUME_10K,
        AchievementType.VOLUME_50K,
    ]


def test_every_type_has_a_definition():
    assert set(ACHIEVEMENTS) == set(AchievementType)


async def test_check_awards_once_and_lists_locked(client, session_maker, coach, athlete):
    athlete_user, headers = athlete
    exercise = await insert_exercise(session_maker)
    for days_ago in (0, 1, 2):
        await insert_completed_session(
            session_maker, athlete_user.id, days_ago, sets=[(100, 10, True)], exercise=exercise
        )

    r = await client.post("/api/v1/achievements/check", json={}, headers=headers)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["count"] == 3
    assert [a["type"] for a in body["new_achievements"]] == ["first_workout", "first_pr", "streak_3"]

    r = await client.post("/api/v1/achievements/check", json={}, headers=headers)
    assert r.json()["count"] == 0

    r = await client.get("/api/v1/achievements", headers=headers)
    overview = r.json()
    assert overview["total_earned"] == 3
    assert overview["total_possible"] == len(AchievementType)
    assert {a["type"] for a in overview["earned"]} == {"first_workout", "first_pr", "streak_3"}
    assert "streak_7" in [a["type"] for a in overview["locked"]]

    r = await client.get("/api/v1/achievements", params={"athlete_id": str(athlete_user.id)}, headers=coach[1])
    assert r.json()["total_earned"] == 3

    r = await client.get("/api/v1/notifications", headers=headers)
    assert [n["type"] for n in r.json()["notifications"]].count("achievement") == 3


async def test_achievements_of_others_are_restricted(client, athlete, other_athlete):
    other_id = str(other_athlete[0].id)
    r = await client.get("/api/v1/achievements", params={"athlete_id": other_id}, headers=athlete[1])
    assert r.status_code == 403
    r = await client.post("/api/v1/achievements/check", json={"athlete_id": other_id}, headers=athlete[1])
    assert r.status_code == 403
