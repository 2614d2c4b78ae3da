"""Tests for /api/schedules and /api/slots routes."""

from datetime import timedelta


class TestScheduleRoutes:
    async def test_create_list_delete(self, client, auth_headers):
        resp = await client.post(
            "/api/schedules",
            json={
                "name": "Mornings",
                "weekdays": [3, 1, 1],
                "start_time": "09:00:00",
                "end_time": "12:00",
                "interval_minutes": 30,
            },
            headers=auth_headers,
        )
        assert resp.status_code == 201
        schedule = resp.json()
        assert schedule["weekdays"] == [1, 3]
        assert schedule["start_time"] == "09:00"

        listed = (await client.get("/api/schedules", headers=auth_headers)).json()
        assert [s["id"] for s in listed] == [schedule["id"]]

        resp = await client.delete(f"/api/schedules/{schedule['id']}", headers=auth_headers)
        assert resp.status_code == 204
        resp = await client.delete(f"/api/schedules/{schedule['id']}", headers=auth_headers)
        assert resp.status_code == 404

    async def test_rejects_bad_interval(self, client, auth_headers):
        resp = await client.post(
            "/api/schedules",
            json={
                "name": "Odd",
                "weekdays": [1],
                "start_time": "09:00",
                "end_time": "10:00",
                "interval_minutes": 45,
            },
            headers=auth_headers,
        )
        assert resp.status_code == 422

    async def test_rejects_end_before_start(self, client, auth_headers):
        resp = await client.post(
            "/api/schedules",
            json={"name": "Back", "weekdays": [1], "start_time": "10:00", "end_time": "09:00"},
            headers=auth_headers,
        )
        assert resp.status_code == 422

    async def test_generate_is_idempotent(self, client, auth_headers):
        await client.post(
            "/api/schedules",
            json={
                "name": "Every day",
                "weekdays": [0, 1, 2, 3, 4, 5, 6],
                "start_time": "09:00",
                "end_time": "10:00",
                "interval_minutes": 20,
            },
            headers=auth_headers,
        )
        resp = await client.post(
            "/api/schedules/generate", json={"days_ahead": 7}, headers=auth_headers
        )
        assert resp.status_code == 200
        assert resp.json() == {"days_ahead": 7, "created": 21}

        resp = await client.post(
            "/api/schedules/generate", json={"days_ahead": 7}, headers=auth_headers
        )
        assert resp.json()["created"] == 0

    async def test_generate_horizon_capped(self, client, auth_headers):
        resp = await client.post(
            "/api/schedules/generate", json={"days_ahead": 91}, headers=auth_headers
        )
        assert resp.status_code == 422


class TestSlotRoutes:
    async def test_add_and_list(self, client, auth_headers, tomorrow):
        resp = await client.post(
            "/api/slots",
            json={"slot_date": tomorrow.isoformat(), "start_time": "14:00", "end_time": "14:45"},
            headers=auth_headers,
        )
        assert resp.status_code == 201
        assert resp.json()["duration_minutes"] == 45

        listed = (await client.get("/api/slots", headers=auth_headers)).json()
        assert len(listed) == 1
        assert listed[0]["is_booked"] is False

    async def test_duplicate_start_409(self, client, auth_headers, tomorrow):
        payload = {"slot_date": tomorrow.isoformat(), "start_time": "14:00", "end_time": "14:30"}
        await client.post("/api/slots", json=payload, headers=auth_headers)
        resp = await client.post("/api/slots", json=payload, headers=auth_headers)
        assert resp.status_code == 409
        assert resp.json()["detail"] == "slot_exists"

    async def test_past_date_400(self, client, auth_headers, today):
        resp = await client.post(
            "/api/slots",
            json={
                "slot_date": (today - timedelta(days=1)).isoformat(),
                "start_time": "14:00",
                "end_time": "14:30",
            },
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "slot_in_past"

    async def test_delete_unbooked(self, client, auth_headers, tomorrow):
        created = await client.post(
            "/api/slots",
            json={"slot_date": tomorrow.isoformat(), "start_time": "14:00", "end_time": "14:30"},
            headers=auth_headers,
        )
        slot_id = created.json()["id"]
        assert (await client.delete(f"/api/slots/{slot_id}", headers=auth_headers)).status_code == 204
        assert (await client.delete(f"/api/slots/{slot_id}", headers=auth_headers)).status_code == 404

    async def test_delete_booked_409(self, client, auth_headers, tomorrow):
        created = await client.post(
            "/api/slots",
            json={"slot_date": tomorrow.isoformat(), "start_time": "14:00", "end_time": "14:30"},
            headers=auth_headers,
        )
        slot_id = created.json()["id"]
        booked = await client.post(
            "/api/book/dr-smith/appointments",
            json={"slot_id": slot_id, "patient_name": "John Doe", "patient_phone": "5551234567"},
        )
        assert booked.status_code == 201

        resp = await client.delete(f"/api/slots/{slot_id}", headers=auth_headers)
        assert resp.status_code == 409
        assert resp.json()["detail"] == "slot_booked"

    async def test_slots_are_per_doctor(self, client, auth_headers, tomorrow):
        from tests.conftest import register_and_login

        created = await client.post(
            "/api/slots",
            json={"slot_date": tomorrow.isoformat(), "start_time": "14:00", "end_time": "14:30"},
            headers=auth_headers,
        )
        other = await register_and_login(client, username="dr-other", email="other@example.com")
        assert (await client.get("/api/slots", headers=other)).json() == []
        resp = await client.delete(f"/api/slots/{created.json()['id']}", headers=other)
        assert resp.status_code == 404
