import io
from unittest.mock import patch

import pytest

from app.models import Service


@pytest.mark.catalog
class TestServiceCatalog:

    def test_public_list_ordered_by_name(self, client, db_session):
        db_session.add_all(
            [
                Service(name="Shave", price=70, duration=20, category="special"),
                Service(name="Beard Trim", price=60, duration=20, category="beard"),
            ]
        )
        db_session.commit()

        response = client.get("/api/services")

        assert response.status_code == 200
        assert [s["name"] for s in response.get_json()] == ["Beard Trim", "Shave"]

    def test_categories(self, client):
        response = client.get("/api/services/categories")
        assert "haircut" in response.get_json()

    def test_create(self, client, manager_headers):
        response = client.post(
            "/api/services",
            json={
                "name": "Cut & Beard",
                "price": 150,
                "duration": 45,
                "category": "combo",
                "discount_percentage": 10,
            },
            headers=manager_headers,
        )

        assert response.status_code == 201
        service = response.get_json()["service"]
        assert service["price"] == 150.0
        assert service["discount_percentage"] == 10.0
        assert service["image_url"] is None

    def test_invalid_category(self, client, manager_headers):
        response = client.post(
            "/api/services",
            json={"name": "Massage", "price": 100, "duration": 30, "category": "spa"},
            headers=manager_headers,
        )

        assert response.status_code == 400
        assert "category" in response.get_json()["errors"]

    def test_barbers_cannot_edit_catalog(self, client, barber_headers):
        response = client.post(
            "/api/services",
            json={"name": "Cut", "price": 10, "duration": 30},
            headers=barber_headers,
        )
        assert response.status_code == 403

    def test_update_price(self, client, manager_headers, sample_service):
        response = client.put(
            f"/api/services/{sample_service.id}",
            json={"price": "110"},
            headers=manager_headers,
        )

        assert response.status_code == 200
        service = response.get_json()["service"]
        assert service["price"] == 110.0
        assert service["name"] == "Classic Cut"

    @patch("app.services.storage_service.upload_file_to_s3")
    def test_create_with_image(self, mock_upload, client, manager_headers, monkeypatch):
        monkeypatch.setenv("S3_BASE_URL", "https://cdn.example.com")

        response = client.post(
            "/api/services",
            data={
                "name": "Kids Cut",
                "price": "60",
                "duration": "20",
                "category": "haircut",
                "image_file": (io.BytesIO(b"fake-image"), "kids.jpg"),
            },
            content_type="multipart/form-data",
            headers=manager_headers,
        )

        assert response.status_code == 201
        service = response.get_json()["service"]
        assert service["image_key"].endswith("-kids.jpg")
        assert service["image_url"].startswith(
            f"https://cdn.example.com/service-images/{service['image_key']}?t="
        )
        args = mock_upload.call_args[0]
        assert args[1] == f"service-images/{service['image_key']}"
        assert args[2] == "test-bucket"

    @patch("app.services.catalog_service.delete_service_image")
    def test_delete_removes_image(
        self, mock_delete, client, manager_headers, db_session
    ):
        service = Service(
            name="Old Style", price=80, duration=30, category="haircut", image_key="1-old.jpg"
        )
        db_session.add(service)
        db_session.commit()

        response = client.delete(f"/api/services/{service.id}", headers=manager_headers)

        assert response.status_code == 200
        mock_delete.assert_called_once_with("1-old.jpg")
        assert db_session.get(Service, service.id) is None

    def test_delete_missing(self, client, manager_headers):
        response = client.delete("/api/services/999", headers=manager_headers)
        assert response.status_code == 404
