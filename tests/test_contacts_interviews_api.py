"""
Tests for the contact and interview child resources.
"""

import pytest


@pytest.fixture
def application(signup, new_application):
    signup()
    return new_application()


class TestContacts:
    def test_create_and_list(self, client, api, application):
        url = f"{api}/applications/{application['id']}/contacts"

        created = client.post(
            url,
            json={"name": "Jane Doe", "role": "Recruiter", "email": "jane@acme.io", "linkedinUrl": "https://l.in/jane"},
        )

        assert created.status_code == 201
        contact = created.json()["contact"]
        assert contact["application_id"] == application["id"]
        assert contact["linkedin_url"] == "https://l.in/jane"

        listed = client.get(url).json()["contacts"]
        assert [c["id"] for c in listed] == [contact["id"]]

    def test_name_required(self, client, api, application):
        response = client.post(f"{api}/applications/{application['id']}/contacts", json={"role": "CTO"})
        assert response.status_code == 400
        assert response.json()["error"].startswith("name")

    def test_partial_update(self, client, api, application):
        contact = client.post(
            f"{api}/applications/{application['id']}/contacts",
            json={"name": "Jane", "phone": "123"},
        ).json()["contact"]

        response = client.put(f"{api}/contacts/{contact['id']}", json={"role": "Hiring Manager"})

        assert response.status_code == 200
        updated = response.json()["contact"]
        assert updated["role"] == "Hiring Manager"
        assert updated["name"] == "Jane"
        assert updated["phone"] == "123"

    def test_delete(self, client, api, application):
        url = f"{api}/applications/{application['id']}/contacts"
        contact = client.post(url, json={"name": "Jane"}).json()["contact"]

        assert client.delete(f"{api}/contacts/{contact['id']}").status_code == 200
        assert client.get(url).json()["contacts"] == []
        missing = client.delete(f"{api}/contacts/{contact['id']}")
        assert missing.status_code == 404
        assert missing.json() == {"error": "Contact not found"}

    def test_unknown_application(self, client, api, application):
        response = client.post(f"{api}/applications/99999/contacts", json={"name": "Jane"})
        assert response.status_code == 404
        assert response.json() == {"error": "Application not found"}


class TestInterviews:
    def test_create_defaults_to_not_completed(self, client, api, application):
        response = client.post(
            f"{api}/applications/{application['id']}/interviews",
            json={
                "interviewType": "technical",
                "scheduledAt": "2026-11-03T15:30:00+02:00",
                "durationMinutes": 60,
                "interviewerNames": "Ada, Grace",
            },
        )

        assert response.status_code == 201
        interview = response.json()["interview"]
        assert interview["completed"] is False
        assert interview["duration_minutes"] == 60
        assert interview["interview_type"] == "technical"
        assert interview["scheduled_at"].startswith("2026-11-03T13:30:00")

    def test_list_in_schedule_order(self, client, api, application):
        url = f"{api}/applications/{application['id']}/interviews"
        client.post(url, json={"interviewType": "onsite", "scheduledAt": "2026-12-01T09:00:00Z"})
        client.post(url, json={"interviewType": "phone", "scheduledAt": "2026-11-01T09:00:00Z"})

        listed = client.get(url).json()["interviews"]

        assert [i["interview_type"] for i in listed] == ["phone", "onsite"]

    @pytest.mark.parametrize(
        "body",
        [
            {"scheduledAt": "2026-11-01T09:00:00Z"},
            {"interviewType": "phone"},
            {"interviewType": "phone", "scheduledAt": "next tuesday"},
            {"interviewType": "phone", "scheduledAt": "2026-11-01T09:00:00Z", "durationMinutes": -5},
        ],
    )
    def test_validation(self, client, api, application, body):
        response = client.post(f"{api}/applications/{application['id']}/interviews", json=body)
        assert response.status_code == 400

    def test_mark_completed(self, client, api, application):
        interview = client.post(
            f"{api}/applications/{application['id']}/interviews",
            json={"interviewType": "phone", "scheduledAt": "2026-11-01T09:00:00Z", "notes": "Bring portfolio"},
        ).json()["interview"]

        response = client.put(f"{api}/interviews/{interview['id']}", json={"completed": True})

        assert response.status_code == 200
        updated = response.json()["interview"]
        assert updated["completed"] is True
        assert updated["notes"] == "Bring portfolio"

    def test_completed_cannot_be_nulled(self, client, api, application):
        interview = client.post(
            f"{api}/applications/{application['id']}/interviews",
            json={"interviewType": "phone", "scheduledAt": "2026-11-01T09:00:00Z"},
        ).json()["interview"]

        response = client.put(f"{api}/interviews/{interview['id']}", json={"completed": None})

        assert response.status_code == 400

    def test_delete(self, client, api, application):
        url = f"{api}/applications/{application['id']}/interviews"
        interview = client.post(
            url, json={"interviewType": "phone", "scheduledAt": "2026-11-01T09:00:00Z"}
        ).json()["interview"]

        assert client.delete(f"{api}/interviews/{interview['id']}").status_code == 200
        assert client.get(url).json()["interviews"] == []
        missing = client.put(f"{api}/interviews/{interview['id']}", json={"completed": True})
        assert missing.status_code == 404
        assert missing.json() == {"error": "Interview not found"}
