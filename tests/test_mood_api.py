"""
Integration tests for the Mood Tracker API.

Runs the FastAPI app in-process against a temporary SQLite store.

Usage:
    pytest tests/test_mood_api.py -v
"""
import pytest

from server.mood_api.services.mood_service import UNAVAILABLE_MESSAGE


def payload(mood, day=1, **fields):
    body = {"date": f"2024-03-{day:02d}", "mood": mood}
    body.update(fields)
    return body


async def submit_all(client, moods, **last_fields):
    for i, mood in enumerate(moods, start=1):
        extra = last_fields if i == len(moods) else {}
        response = await client.post("/api/submit", json=payload(mood, day=i, **extra))
        assert response.status_code == 201
    return response


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "OK"
        assert data["message"] == "Mood Tracker API is running"
        assert "timestamp" in data

    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        response = await client.get("/api/nothing")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Route not found"}


class TestSubmit:
    """Test POST /api/submit."""

    @pytest.mark.asyncio
    async def test_submit_entry(self, client):
        response = await client.post(
            "/api/submit",
            json=payload(7, notes="ok", activities=["walk"], energy=5, sleep_hours=7.5),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Mood data submitted successfully"

        data = body["data"]
        assert data["submittedData"]["date"] == "2024-03-01"
        assert data["submittedData"]["activities"] == ["walk"]
        assert data["sheetResult"] == {"sheet": "MoodData", "rowNumber": 2}
        assert data["auditLogged"] is True
        assert data["summaryStats"] == {"average": 7, "highest": 7, "lowest": 7, "totalEntries": 1}
        assert data["summaryRefreshed"] is True
        assert data["riskAssessment"]["windowSize"] == 1
        assert data["riskSummaryRefreshed"] is True

    @pytest.mark.asyncio
    async def test_submitted_entry_is_listed(self, client):
        await client.post("/api/submit", json=payload(7, notes="ok", activities=["walk", "read"], energy=5))

        response = await client.get("/api/mood")

        assert response.status_code == 200
        entries = response.json()["data"]
        assert len(entries) == 1
        assert entries[0]["date"] == "2024-03-01"
        assert entries[0]["mood"] == 7
        assert entries[0]["notes"] == "ok"
        assert entries[0]["activities"] == ["walk", "read"]
        assert entries[0]["energy"] == 5
        assert entries[0]["anxiety"] is None

    @pytest.mark.asyncio
    async def test_timestamp_truncated_to_date(self, client):
        response = await client.post("/api/submit", json={"date": "2024-03-05T23:30:00Z", "mood": 5})

        assert response.status_code == 201
        assert response.json()["data"]["submittedData"]["date"] == "2024-03-05"

    @pytest.mark.asyncio
    async def test_date_defaults_to_today(self, client):
        response = await client.post("/api/submit", json={"mood": 5})

        assert response.status_code == 201
        assert response.json()["data"]["submittedData"]["date"]

    @pytest.mark.asyncio
    async def test_submit_to_named_sheet(self, client):
        response = await client.post("/api/submit", json=payload(6, sheet_name="Clinic"))

        assert response.json()["data"]["sheetResult"]["sheet"] == "Clinic"
        listed = await client.get("/api/mood")
        assert listed.json()["data"] == []

    @pytest.mark.asyncio
    async def test_padded_notes_round_trip(self, client):
        response = await client.post("/api/submit", json=payload(7, notes=" tired "))

        risk = response.json()["data"]["riskAssessment"]
        assert risk["historySize"] == 1
        assert risk["windowSize"] == 1

        listed = await client.get("/api/mood")
        assert listed.json()["data"][0]["notes"] == " tired "

    @pytest.mark.asyncio
    async def test_activity_with_comma_rejected(self, client):
        response = await client.post("/api/submit", json=payload(7, activities=["walk, run"]))

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "activities.0"

    @pytest.mark.asyncio
    async def test_single_entry_means_on_score_scale(self, client):
        response = await client.post("/api/submit", json=payload(7, energy=3))

        means = response.json()["data"]["riskAssessment"]["sevenDayMeans"]
        assert means == {"mood": 7, "energy": 3, "anxiety": 0, "irritability": 0}

    @pytest.mark.asyncio
    async def test_hypomania_flagged_on_submit(self, client):
        response = await submit_all(client, [5, 6, 6, 7, 8, 8, 9], energy=6, anxiety=1)

        risk = response.json()["data"]["riskAssessment"]
        assert risk["riskFlags"] == {"hypomania": True, "depression": False}
        assert risk["reason"].startswith("Hypomania pattern")

    @pytest.mark.parametrize(
        "body,field",
        [
            ({"date": "2024-03-01", "mood": 11}, "mood"),
            ({"date": "2024-03-01", "mood": 0}, "mood"),
            ({"date": "2024-03-01"}, "mood"),
            ({"date": "not-a-date", "mood": 5}, "date"),
            ({"date": "2024-03-01", "mood": 5, "sleep_hours": 25}, "sleep_hours"),
            ({"date": "2024-03-01", "mood": 5, "notes": "x" * 501}, "notes"),
            ({"date": "2024-03-01", "mood": 5, "unexpected": True}, "unexpected"),
        ],
    )
    @pytest.mark.asyncio
    async def test_invalid_submission(self, client, body, field):
        response = await client.post("/api/submit", json=body)

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["message"].startswith("Validation error")
        assert data["errors"][0]["field"] == field
        assert "data" not in data

    @pytest.mark.asyncio
    async def test_invalid_submission_not_stored(self, client):
        await client.post("/api/submit", json={"date": "2024-03-01", "mood": 42})

        response = await client.get("/api/mood")
        assert response.json()["data"] == []


class TestLegacyLog:
    """Test POST /api/mood."""

    @pytest.mark.asyncio
    async def test_log_entry_without_summaries(self, client, store):
        response = await client.post("/api/mood", json=payload(6))

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Mood entry logged successfully"
        assert body["data"]["entry"]["mood"] == 6
        assert body["data"]["sheetResult"]["rowNumber"] == 2
        assert len(store.read("Summary")) == 1

    @pytest.mark.asyncio
    async def test_log_entry_validates(self, client):
        response = await client.post("/api/mood", json={"mood": "happy"})

        assert response.status_code == 400


class TestQueries:
    """Test GET /api/mood, /api/mood/stats and /api/mood/risk."""

    @pytest.mark.asyncio
    async def test_history_range(self, client):
        await submit_all(client, [3, 1, 2, 5])

        response = await client.get(
            "/api/mood", params={"start_date": "2024-03-02", "end_date": "2024-03-03"}
        )

        assert [e["mood"] for e in response.json()["data"]] == [1, 2]

    @pytest.mark.asyncio
    async def test_start_after_end(self, client):
        response = await client.get(
            "/api/mood", params={"start_date": "2024-03-05", "end_date": "2024-03-01"}
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "start_date"

    @pytest.mark.asyncio
    async def test_bad_query_date(self, client):
        response = await client.get("/api/mood/stats", params={"start_date": "March"})

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "start_date"

    @pytest.mark.asyncio
    async def test_stats(self, client):
        await submit_all(client, [1, 2, 3, 3, 4])

        response = await client.get("/api/mood/stats")

        assert response.json()["data"] == {"average": 2.6, "highest": 4, "lowest": 1, "totalEntries": 5}

    @pytest.mark.asyncio
    async def test_stats_without_entries(self, client):
        response = await client.get("/api/mood/stats")

        assert response.status_code == 200
        assert response.json()["data"]["totalEntries"] == 0

    @pytest.mark.asyncio
    async def test_risk_without_entries(self, client):
        response = await client.get("/api/mood/risk")

        assert response.status_code == 200
        body = response.json()
        assert body["data"] is None
        assert "Not enough mood history" in body["message"]

    @pytest.mark.asyncio
    async def test_risk_of_latest_entry(self, client):
        await submit_all(client, [5, 6, 6, 7, 8, 8, 9], energy=6, anxiety=1)

        response = await client.get("/api/mood/risk")

        data = response.json()["data"]
        assert data["date"] == "2024-03-07"
        assert data["sevenDayMeans"]["mood"] == 7.0
        assert data["moodTrend"] > 0
        assert data["riskFlags"]["hypomania"] is True
        assert data["historySize"] == 7

    @pytest.mark.asyncio
    async def test_risk_start_date_keeps_earlier_history(self, client):
        await submit_all(client, [2, 8, 2, 8, 5, 9])

        ranged = await client.get("/api/mood/risk", params={"start_date": "2024-03-06"})
        unranged = await client.get("/api/mood/risk")

        data = ranged.json()["data"]
        assert data["historySize"] == 6
        assert data["moodZScore"] == unranged.json()["data"]["moodZScore"]


class TestStoreUnavailable:
    """Test behaviour when the store cannot be reached."""

    @pytest.mark.asyncio
    async def test_submit_fails_with_502(self, unavailable_client):
        response = await unavailable_client.post("/api/submit", json=payload(5))

        assert response.status_code == 502
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Mood store is unavailable, please try again"

    @pytest.mark.asyncio
    async def test_history_degrades(self, unavailable_client):
        response = await unavailable_client.get("/api/mood")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": UNAVAILABLE_MESSAGE, "data": []}

    @pytest.mark.asyncio
    async def test_stats_degrade(self, unavailable_client):
        response = await unavailable_client.get("/api/mood/stats")

        assert response.status_code == 200
        assert response.json()["data"]["totalEntries"] == 0
        assert response.json()["message"] == UNAVAILABLE_MESSAGE

    @pytest.mark.asyncio
    async def test_risk_degrades(self, unavailable_client):
        response = await unavailable_client.get("/api/mood/risk")

        assert response.status_code == 200
        assert response.json()["data"] is None
