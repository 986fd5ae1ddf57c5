"""
Pytest configuration and shared fixtures for the barbershop API tests.
"""

from datetime import date

import bcrypt
import pytest

from main import create_app
from app.extensions import db as database
from app.models import Appointment, AuthUser, Barber, Base, Client, Review, Service

TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
    "SECRET_KEY": "test-secret-key-for-testing-only",
    "S3_BUCKET_NAME": "test-bucket",
}


@pytest.fixture
def app():
    """Fresh app and schema for every test."""
    app = create_app(TEST_CONFIG)

    with app.app_context():
        Base.metadata.create_all(bind=database.engine)
        yield app
        database.session.remove()
        Base.metadata.drop_all(bind=database.engine)


@pytest.fixture
def db_session(app):
    return database.session


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, email, password):
    response = client.post(
        "/api/auth/login", json={"email": email, "password": password}
    )
    assert response.status_code == 200, response.get_json()
    return {"Authorization": f"Bearer {response.get_json()['token']}"}


@pytest.fixture
def manager_user(db_session):
    user = AuthUser(
        email="manager@barbershop.test",
        password_hash=bcrypt.hashpw(b"managerpass", bcrypt.gensalt()),
        role="MANAGER",
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def manager_headers(client, manager_user):
    return _login(client, "manager@barbershop.test", "managerpass")


@pytest.fixture
def sample_barber(db_session):
    """Barber with a 50% commission rate and a login."""
    user = AuthUser(
        email="ali@barbershop.test",
        password_hash=bcrypt.hashpw(b"barberpass", bcrypt.gensalt()),
        role="BARBER",
    )
    db_session.add(user)
    db_session.flush()

    barber = Barber(
        user_id=user.id,
        name="Ali Demir",
        email="ali@barbershop.test",
        phone="555-0101",
        specialty="Fades",
        commission_rate=50,
        join_date=date(2023, 1, 15),
        active=True,
    )
    db_session.add(barber)
    db_session.commit()
    return barber


@pytest.fixture
def second_barber(db_session):
    barber = Barber(
        name="Mehmet Kaya",
        email="mehmet@barbershop.test",
        commission_rate=60,
        join_date=date(2023, 6, 1),
        active=True,
    )
    db_session.add(barber)
    db_session.commit()
    return barber


@pytest.fixture
def barber_headers(client, sample_barber):
    return _login(client, "ali@barbershop.test", "barberpass")


@pytest.fixture
def sample_service(db_session):
    service = Service(
        name="Classic Cut", price=95, duration=30, category="haircut", is_popular=True
    )
    db_session.add(service)
    db_session.commit()
    return service


@pytest.fixture
def sample_client(db_session):
    client = Client(name="Can Yilmaz", email="can@example.com", phone="555-0199")
    db_session.add(client)
    db_session.commit()
    return client


@pytest.fixture
def make_appointment(db_session):
    """Insert an appointment row directly, bypassing the booking rules."""

    def _make(barber, service, client=None, **overrides):
        values = {
            "client_id": client.id if client else None,
            "barber_id": barber.id,
            "service_id": service.id if service else None,
            "date": date.today(),
            "time": "10:00",
            "status": "scheduled",
            "type": "appointment",
            "duration": 30,
            "price": 95,
            "commission_amount": 47.5,
        }
        values.update(overrides)
        appointment = Appointment(**values)
        db_session.add(appointment)
        db_session.commit()
        return appointment

    return _make


@pytest.fixture
def make_review(db_session):
    def _make(barber, rating=5, approved=False, client_name="Happy Client", **extra):
        review = Review(
            barber_id=barber.id,
            client_name=client_name,
            rating=rating,
            comment=extra.pop("comment", "Great cut"),
            approved=approved,
            **extra,
        )
        db_session.add(review)
        db_session.commit()
        return review

    return _make
