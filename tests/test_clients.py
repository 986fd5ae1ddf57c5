import pytest

from app.models import Appointment


@pytest.mark.clients
class TestClients:

    def test_create_and_list(self, client, barber_headers):
        response = client.post(
            "/api/clients",
            json={"name": "Deniz Arslan", "phone": "+90 555 000 11 22"},
            headers=barber_headers,
        )

        assert response.status_code == 201
        created = response.get_json()["client"]
        assert created["total_visits"] == 0
        assert created["email"] is None

        listing = client.get("/api/clients", headers=barber_headers).get_json()
        assert [c["name"] for c in listing] == ["Deniz Arslan"]

    def test_invalid_email(self, client, manager_headers):
        response = client.post(
            "/api/clients",
            json={"name": "Bad Mail", "email": "nope"},
            headers=manager_headers,
        )

        assert response.status_code == 400
        assert response.get_json()["errors"] == {"email": "Email is invalid"}

    def test_total_visits_counts_completed_appointments(
        self, client, manager_headers, sample_barber, sample_service, sample_client, make_appointment
    ):
        make_appointment(sample_barber, sample_service, sample_client, status="completed")
        make_appointment(
            sample_barber, sample_service, sample_client, status="completed", time="11:00"
        )
        make_appointment(
            sample_barber, sample_service, sample_client, status="cancelled", time="12:00"
        )
        make_appointment(sample_barber, sample_service, sample_client, time="13:00")

        response = client.get(f"/api/clients/{sample_client.id}", headers=manager_headers)

        assert response.get_json()["total_visits"] == 2

    def test_update(self, client, manager_headers, sample_client, sample_barber):
        response = client.put(
            f"/api/clients/{sample_client.id}",
            json={"preferred_barber_id": str(sample_barber.id), "notes": "Likes it short"},
            headers=manager_headers,
        )

        assert response.status_code == 200
        updated = response.get_json()["client"]
        assert updated["preferred_barber_id"] == sample_barber.id
        assert updated["notes"] == "Likes it short"
        assert updated["name"] == "Can Yilmaz"

    def test_delete_keeps_appointment_history(
        self,
        client,
        manager_headers,
        db_session,
        sample_barber,
        sample_service,
        sample_client,
        make_appointment,
    ):
        appointment = make_appointment(
            sample_barber, sample_service, sample_client, status="completed"
        )

        response = client.delete(
            f"/api/clients/{sample_client.id}", headers=manager_headers
        )

        assert response.status_code == 200
        db_session.expire_all()
        stored = db_session.get(Appointment, appointment.id)
        assert stored is not None
        assert stored.client_id is None

    def test_barber_cannot_delete(self, client, barber_headers, sample_client):
        response = client.delete(
            f"/api/clients/{sample_client.id}", headers=barber_headers
        )
        assert response.status_code == 403

    def test_missing_client(self, client, manager_headers):
        response = client.get("/api/clients/999", headers=manager_headers)
        assert response.status_code == 404
