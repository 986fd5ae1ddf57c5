import pytest

from app.models import Barber, Review
from app.services.review_service import barber_rating, get_reviews_by_barber


@pytest.mark.reviews
class TestModerationQueue:

    def test_filters(self, client, manager_headers, sample_barber, make_review):
        make_review(sample_barber, rating=5, approved=True)
        make_review(sample_barber, rating=2, approved=False)

        pending = client.get("/api/reviews?filter=pending", headers=manager_headers)
        approved = client.get("/api/reviews?filter=approved", headers=manager_headers)
        everything = client.get("/api/reviews", headers=manager_headers)

        assert [r["rating"] for r in pending.get_json()] == [2]
        assert [r["rating"] for r in approved.get_json()] == [5]
        assert len(everything.get_json()) == 2

    def test_unknown_filter(self, client, manager_headers):
        response = client.get("/api/reviews?filter=spam", headers=manager_headers)
        assert response.status_code == 400

    def test_barbers_cannot_moderate(self, client, barber_headers):
        response = client.get("/api/reviews", headers=barber_headers)
        assert response.status_code == 403


@pytest.mark.reviews
class TestApproval:

    def test_approve_updates_barber_rating(
        self, client, manager_headers, db_session, sample_barber, make_review
    ):
        make_review(sample_barber, rating=5, approved=True)
        pending = make_review(sample_barber, rating=4)

        response = client.put(
            f"/api/reviews/{pending.id}/approve", headers=manager_headers
        )

        assert response.status_code == 200
        assert response.get_json()["review"]["approved"] is True
        barber = db_session.get(Barber, sample_barber.id)
        assert float(barber.rating) == 4.5

    def test_approved_review_cannot_go_back_to_pending(
        self, client, manager_headers, sample_barber, make_review
    ):
        review = make_review(sample_barber, approved=True)

        response = client.put(
            f"/api/reviews/{review.id}/approve",
            json={"approved": False},
            headers=manager_headers,
        )

        assert response.status_code == 409

    def test_approve_missing_review(self, client, manager_headers):
        response = client.put("/api/reviews/404/approve", headers=manager_headers)
        assert response.status_code == 404

    def test_approved_flag_must_be_boolean(
        self, client, manager_headers, db_session, sample_barber, make_review
    ):
        review = make_review(sample_barber, approved=True)

        response = client.put(
            f"/api/reviews/{review.id}/approve",
            json={"approved": "false"},
            headers=manager_headers,
        )

        assert response.status_code == 400
        assert db_session.get(Review, review.id).approved is True

    def test_approved_review_cannot_be_rejected(
        self, client, manager_headers, db_session, sample_barber, make_review
    ):
        review = make_review(sample_barber, rating=5, approved=True)

        response = client.delete(f"/api/reviews/{review.id}", headers=manager_headers)

        assert response.status_code == 409
        assert db_session.get(Review, review.id) is not None

    def test_reject_deletes(self, client, manager_headers, db_session, sample_barber, make_review):
        review = make_review(sample_barber, rating=1)

        response = client.delete(f"/api/reviews/{review.id}", headers=manager_headers)

        assert response.status_code == 200
        assert db_session.get(Review, review.id) is None


@pytest.mark.reviews
class TestPublicReviews:

    def test_only_approved_reviews_are_public(self, client, sample_barber, make_review):
        make_review(sample_barber, rating=5, approved=True, client_name="Shown")
        make_review(sample_barber, rating=1, approved=False, client_name="Hidden")

        response = client.get(f"/api/reviews/barber/{sample_barber.id}")

        assert [r["client_name"] for r in response.get_json()] == ["Shown"]

    def test_limit(self, app, sample_barber, make_review):
        for rating in (3, 4, 5):
            make_review(sample_barber, rating=rating, approved=True)

        reviews = get_reviews_by_barber(sample_barber.id, limit=2)

        assert len(reviews) == 2

    def test_rating_without_reviews(self, app, sample_barber):
        assert barber_rating(sample_barber.id) == 0.0

    def test_rating_rounds_to_one_decimal(self, app, sample_barber, make_review):
        for rating in (5, 4, 4):
            make_review(sample_barber, rating=rating, approved=True)

        assert barber_rating(sample_barber.id) == 4.3
