from __future__ import annotations

import unittest
from unittest import mock

from fastapi.testclient import TestClient
from icalendar import Calendar

import server.app as server_app
from server import create_app, get_generator, get_settings, get_store
from services.ai_client import ScheduleGenerator
from services.config import Settings
from services.errors import PaymentRequiredError, RateLimitError

from fakes import MemoryStore


SCHEDULE_TEXT = "9:00 AM - 10:30 AM - Focus study session\nTIPS AND TRICKS\n- Stay hydrated"

FORM = {
    "sleepTime": "23:00",
    "wakeTime": "07:00",
    "energyPeaks": "mornings",
    "studyGoals": "finish calculus",
}


class TestServer(unittest.TestCase):
    def setUp(self) -> None:
        self.app = create_app()
        self.store = MemoryStore(
            {"study_schedules": [{"id": "abc123", "generated_schedule": SCHEDULE_TEXT}]}
        )
        self.generator = mock.Mock(spec=ScheduleGenerator)
        self.app.dependency_overrides[get_store] = lambda: self.store
        self.app.dependency_overrides[get_generator] = lambda: self.generator
        self.client = TestClient(self.app)

    def test_calendar_export(self) -> None:
        response = self.client.get("/generate-calendar", params={"scheduleId": "abc123"})

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.headers["content-type"].startswith("text/calendar"))
        self.assertIn("study-schedule.ics", response.headers["content-disposition"])
        self.assertEqual(response.headers["access-control-allow-origin"], "*")

        events = Calendar.from_ical(response.content).walk("VEVENT")
        self.assertEqual(len(events), 1)
        self.assertEqual(str(events[0]["summary"]), "Focus study session")

    def test_calendar_unknown_schedule(self) -> None:
        response = self.client.get("/generate-calendar", params={"scheduleId": "nope"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Schedule not found"})
        self.assertEqual(response.headers["access-control-allow-origin"], "*")

    def test_calendar_missing_id(self) -> None:
        response = self.client.get("/generate-calendar")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Schedule ID is required"})

    def test_calendar_missing_configuration(self) -> None:
        del self.app.dependency_overrides[get_store]
        self.app.dependency_overrides[get_settings] = lambda: Settings()

        response = self.client.get("/generate-calendar", params={"scheduleId": "abc123"})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Missing Supabase configuration"})

    def test_preflight(self) -> None:
        response = self.client.options("/generate-calendar")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.content, b"")
        self.assertEqual(response.headers["access-control-allow-origin"], "*")
        self.assertIn("apikey", response.headers["access-control-allow-headers"])

    def test_generate_schedule(self) -> None:
        self.generator.generate.return_value = "7:00 AM - 8:00 AM - Wake up"

        response = self.client.post("/generate-schedule", json=FORM)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"schedule": "7:00 AM - 8:00 AM - Wake up"})
        request = self.generator.generate.call_args.args[0]
        self.assertEqual(request.study_goals, "finish calculus")

    def test_generate_schedule_rate_limited(self) -> None:
        self.generator.generate.side_effect = RateLimitError(
            "Rate limit exceeded. Please try again later."
        )
        response = self.client.post("/generate-schedule", json=FORM)
        self.assertEqual(response.status_code, 429)
        self.assertEqual(
            response.json(), {"error": "Rate limit exceeded. Please try again later."}
        )

    def test_generate_schedule_payment_required(self) -> None:
        self.generator.generate.side_effect = PaymentRequiredError("Payment required.")
        response = self.client.post("/generate-schedule", json=FORM)
        self.assertEqual(response.status_code, 402)
        self.assertEqual(response.json(), {"error": "Payment required."})

    def test_generate_schedule_missing_key(self) -> None:
        del self.app.dependency_overrides[get_generator]
        self.app.dependency_overrides[get_settings] = lambda: Settings()

        response = self.client.post("/generate-schedule", json=FORM)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "LOVABLE_API_KEY is not configured"})

    def test_generate_schedule_invalid_body(self) -> None:
        response = self.client.post("/generate-schedule", json={"sleepTime": "23:00"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "wakeTime: Field required"})
        self.assertEqual(response.headers["access-control-allow-origin"], "*")
        self.generator.generate.assert_not_called()

    def test_generate_schedule_unparseable_body(self) -> None:
        response = self.client.post(
            "/generate-schedule",
            content=b"not json",
            headers={"content-type": "application/json"},
        )
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "JSON decode error"})
        self.generator.generate.assert_not_called()

    def test_unexpected_error_is_reported_without_extra_logging(self) -> None:
        self.generator.generate.side_effect = KeyError("boom")
        client = TestClient(self.app, raise_server_exceptions=False)

        with mock.patch.object(server_app.logger, "exception") as log_exception:
            response = client.post("/generate-schedule", json=FORM)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "'boom'"})
        self.assertEqual(response.headers["access-control-allow-origin"], "*")
        log_exception.assert_not_called()

    def test_render_schedule(self) -> None:
        response = self.client.post("/render-schedule", json={"schedule": SCHEDULE_TEXT})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(
            [s["kind"] for s in body["segments"]],
            ["timed_block", "section_header", "tip"],
        )
        self.assertEqual(body["segments"][0]["start_time"], "9:00 AM")
        self.assertIn("time-block", body["html"])


if __name__ == "__main__":
    unittest.main()
