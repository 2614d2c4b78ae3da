"""Tests for /api/appointments and /api/dashboard."""

from tests.conftest import complete_profile


async def _book(client, headers, day, start="10:00", end="10:30", name="John Doe"):
    slot = await client.post(
        "/api/slots",
        json={"slot_date": day.isoformat(), "start_time": start, "end_time": end},
        headers=headers,
    )
    resp = await client.post(
        "/api/book/dr-smith/appointments",
        json={"slot_id": slot.json()["id"], "patient_name": name, "patient_phone": "5551234567"},
    )
    assert resp.status_code == 201
    return resp.json()


class TestAppointmentRoutes:
    async def test_get_one(self, client, auth_headers, tomorrow):
        booked = await _book(client, auth_headers, tomorrow)
        resp = await client.get(f"/api/appointments/{booked['id']}", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["time_slot"]["start_time"] == "10:00"

    async def test_status_flow(self, client, auth_headers, tomorrow):
        booked = await _book(client, auth_headers, tomorrow)
        url = f"/api/appointments/{booked['id']}/status"

        resp = await client.patch(
            url, json={"status": "completed", "doctor_notes": "Follow up in 6 months"},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "completed"

        resp = await client.patch(url, json={"status": "cancelled"}, headers=auth_headers)
        assert resp.status_code == 409
        assert resp.json()["detail"] == "invalid_status_transition"

    async def test_cannot_set_confirmed(self, client, auth_headers, tomorrow):
        booked = await _book(client, auth_headers, tomorrow)
        resp = await client.patch(
            f"/api/appointments/{booked['id']}/status",
            json={"status": "confirmed"},
            headers=auth_headers,
        )
        assert resp.status_code == 422

    async def test_status_filter_query(self, client, auth_headers, tomorrow):
        first = await _book(client, auth_headers, tomorrow, "09:00", "09:30", "Alice")
        await _book(client, auth_headers, tomorrow, "09:30", "10:00", "Bob")
        await client.patch(
            f"/api/appointments/{first['id']}/status",
            json={"status": "no_show"},
            headers=auth_headers,
        )
        resp = await client.get(
            "/api/appointments", params={"status": "no_show"}, headers=auth_headers
        )
        body = resp.json()
        assert body["total"] == 1
        assert body["items"][0]["patient_name"] == "Alice"

    async def test_other_doctor_404(self, client, auth_headers, tomorrow):
        from tests.conftest import register_and_login

        booked = await _book(client, auth_headers, tomorrow)
        other = await register_and_login(client, username="dr-other", email="other@example.com")
        resp = await client.get(f"/api/appointments/{booked['id']}", headers=other)
        assert resp.status_code == 404


class TestDashboardRoute:
    async def test_requires_completed_profile(self, client, auth_headers):
        resp = await client.get("/api/dashboard", headers=auth_headers)
        assert resp.status_code == 403
        assert resp.json()["detail"] == "profile_incomplete"

    async def test_summary(self, client, auth_headers, today, tomorrow):
        await complete_profile(client, auth_headers)
        await _book(client, auth_headers, today, "23:00", "23:30", "Today Patient")
        await _book(client, auth_headers, tomorrow, "10:00", "10:30", "Tomorrow Patient")
        await client.post(
            "/api/slots",
            json={"slot_date": tomorrow.isoformat(), "start_time": "11:00", "end_time": "11:30"},
            headers=auth_headers,
        )

        resp = await client.get("/api/dashboard", headers=auth_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["username"] == "dr-smith"
        assert body["full_name"] == "Dr. Jane Smith"
        assert body["stats"]["today_appointments"] == 1
        assert body["stats"]["available_slots"] == 1
        assert len(body["recent_appointments"]) == 2
        assert body["booking_link"].endswith("/dr-smith")
