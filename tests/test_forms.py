from datetime import date, datetime
from decimal import Decimal

import pytest

from app.forms.appointment_form import AppointmentForm, WalkInForm
from app.forms.barber_form import BarberForm
from app.forms.base import FormState
from app.forms.client_form import ClientForm
from app.forms.service_form import ServiceForm

BARBERS = [
    {"id": 1, "name": "Ali", "commission_rate": 50.0, "active": True},
    {"id": 2, "name": "Mehmet", "commission_rate": 60.0, "active": True},
    {"id": 3, "name": "Retired", "commission_rate": 40.0, "active": False},
]
SERVICES = [
    {"id": 10, "name": "Classic Cut", "price": 95.0, "duration": 30},
    {"id": 11, "name": "Cut & Beard", "price": 150.0, "duration": 45},
]


@pytest.mark.forms
class TestAppointmentForm:

    def test_new_form_preselects_first_barber_and_service(self):
        form = AppointmentForm(BARBERS, SERVICES, today=date(2024, 5, 1))

        assert form.values["barber_id"] == 1
        assert form.values["service_id"] == 10
        assert form.values["price"] == Decimal("95.00")
        assert form.values["duration"] == 30
        assert form.values["commission_amount"] == Decimal("47.50")
        assert form.values["date"] == "2024-05-01"
        assert form.values["time"] == "10:00"
        assert form.state == FormState.UNEDITED

    def test_commission_independent_of_selection_order(self):
        barber_first = AppointmentForm(BARBERS, SERVICES)
        barber_first.change("barber_id", 2)
        barber_first.change("service_id", 11)

        service_first = AppointmentForm(BARBERS, SERVICES)
        service_first.change("service_id", 11)
        service_first.change("barber_id", 2)

        assert barber_first.values["commission_amount"] == Decimal("90.00")
        assert (
            barber_first.values["commission_amount"]
            == service_first.values["commission_amount"]
        )

    def test_commission_cannot_be_overridden(self):
        form = AppointmentForm(BARBERS, SERVICES)
        form.change("commission_amount", 5)

        assert form.values["commission_amount"] == Decimal("47.50")

    def test_price_and_duration_follow_the_service(self):
        form = AppointmentForm(BARBERS, SERVICES)
        form.update({"service_id": 11, "price": 1, "duration": 5})

        assert form.values["price"] == Decimal("150.00")
        assert form.values["duration"] == 45
        assert form.values["commission_amount"] == Decimal("75.00")

    def test_unknown_barber_and_service_are_field_errors(self):
        form = AppointmentForm(BARBERS[:1], SERVICES)
        form.update({"client_id": 4, "barber_id": 2, "service_id": 9999})

        errors = form.validate()

        assert errors == {
            "barber_id": "Selected barber is not available",
            "service_id": "Selected service does not exist",
        }

    def test_malformed_date_and_time(self):
        form = AppointmentForm(BARBERS, SERVICES)
        form.update({"client_id": 4, "date": "2030-13-45", "time": "25:99"})

        errors = form.validate()

        assert errors == {
            "date": "Date must be YYYY-MM-DD",
            "time": "Time must be HH:MM",
        }

    def test_commission_zero_without_barber(self):
        form = AppointmentForm([], SERVICES)

        assert form.values["price"] == Decimal("95.00")
        assert form.values["commission_amount"] == Decimal("0.00")

    def test_type_change_clears_client_only(self):
        form = AppointmentForm(BARBERS, SERVICES)
        form.change("client_id", 7)
        form.change("walk_in_client_name", "Someone")
        form.change("type", "walk-in")

        assert form.values["client_id"] == ""
        assert form.values["walk_in_client_name"] == ""
        assert form.values["barber_id"] == 1
        assert form.values["service_id"] == 10

    def test_empty_form_reports_each_field_and_skips_callback(self):
        calls = []
        form = AppointmentForm([], [])
        form.change("date", "")
        form.change("time", "")

        result = form.submit(calls.append)

        assert result is None
        assert calls == []
        assert form.state == FormState.REJECTED
        assert form.errors == {
            "client_id": "Client is required",
            "barber_id": "Barber is required",
            "service_id": "Service is required",
            "date": "Date is required",
            "time": "Time is required",
        }

    def test_walk_in_client_message(self):
        form = AppointmentForm(BARBERS, SERVICES)
        form.change("type", "walk-in")

        errors = form.validate()

        assert errors["client_id"] == "For walk-ins, a client must be selected."

    def test_submit_assembles_record_for_new_appointment(self):
        received = []
        form = AppointmentForm(BARBERS, SERVICES)
        form.update({"client_id": "4", "time": "11:30", "notes": "Short on top"})

        form.submit(lambda record: received.append(record) or {"success": True})

        assert form.state == FormState.SUBMITTED
        record = received[0]
        assert "id" not in record
        assert record["client_id"] == 4
        assert record["time"] == "11:30"
        assert record["commission_amount"] == Decimal("47.50")
        assert "updated_at" in record

    def test_update_applies_type_before_client(self):
        form = AppointmentForm(BARBERS, SERVICES)
        form.update({"client_id": 4, "type": "walk-in"})

        assert form.values["client_id"] == 4
        assert form.values["type"] == "walk-in"

    def test_walk_in_record_drops_walk_in_name(self):
        received = []
        form = AppointmentForm(BARBERS, SERVICES)
        form.change("type", "walk-in")
        form.change("client_id", 4)
        form.change("walk_in_client_name", "Typed name")

        form.submit(received.append)

        assert received[0]["walk_in_client_name"] is None

    def test_editing_keeps_id(self):
        existing = {
            "id": 55,
            "client_id": 4,
            "barber_id": 2,
            "service_id": 11,
            "date": "2024-05-02",
            "time": "14:00",
            "status": "scheduled",
            "type": "appointment",
            "duration": 45,
            "price": 150.0,
            "commission_amount": 90.0,
        }
        received = []
        form = AppointmentForm(BARBERS, SERVICES, appointment=existing)
        form.change("time", "15:00")

        form.submit(received.append)

        assert received[0]["id"] == 55
        assert received[0]["time"] == "15:00"

    def test_failed_callback_leaves_form_rejected(self):
        form = AppointmentForm(BARBERS, SERVICES)
        form.change("client_id", 4)

        result = form.submit(lambda record: {"success": False, "error": "boom"})
        assert form.state == FormState.REJECTED
        assert result["error"] == "boom"

        form.change("time", "12:00")
        form.submit(lambda record: {"success": True})
        assert form.state == FormState.SUBMITTED

    def test_raising_callback_propagates(self):
        form = AppointmentForm(BARBERS, SERVICES)
        form.change("client_id", 4)

        def explode(record):
            raise RuntimeError("store down")

        with pytest.raises(RuntimeError):
            form.submit(explode)
        assert form.state == FormState.REJECTED

    def test_time_slots(self):
        slots = AppointmentForm(BARBERS, SERVICES).time_slots()

        assert slots[0] == "10:00"
        assert slots[1] == "10:30"
        assert slots[-1] == "22:00"
        assert len(slots) == 25


@pytest.mark.forms
class TestWalkInForm:

    def test_defaults(self):
        form = WalkInForm(BARBERS, SERVICES, now=datetime(2024, 5, 1, 16, 42))

        assert form.values["type"] == "walk-in"
        assert form.values["time"] == "16:42"
        assert form.values["date"] == "2024-05-01"
        assert 3 not in form.barbers

    def test_type_is_fixed(self):
        form = WalkInForm(BARBERS, SERVICES)
        form.change("type", "appointment")

        assert form.values["type"] == "walk-in"

    def test_validates_only_selections(self):
        form = WalkInForm([], [])
        form.change("date", "")

        errors = form.validate()

        assert set(errors) == {"client_id", "barber_id", "service_id"}

    def test_inactive_barber_is_rejected(self):
        form = WalkInForm(BARBERS, SERVICES)
        form.update({"client_id": 4, "barber_id": 3})

        assert form.validate() == {"barber_id": "Selected barber is not available"}

    def test_malformed_time(self):
        form = WalkInForm(BARBERS, SERVICES)
        form.update({"client_id": 4, "time": "noon"})

        assert form.validate() == {"time": "Time must be HH:MM"}


@pytest.mark.forms
class TestBarberForm:

    def test_new_barber_requirements(self):
        form = BarberForm()
        form.change("commission_rate", 150)

        errors = form.validate()

        assert errors["name"] == "Name is required"
        assert errors["email"] == "Email is required"
        assert errors["commission_rate"] == "Commission rate must be between 0 and 100"
        assert errors["password"] == "Password is required for new barbers"

    def test_password_mismatch(self):
        form = BarberForm()
        form.update(
            {
                "name": "Ali",
                "email": "ali@example.com",
                "password": "secret1",
                "confirm_password": "secret2",
            }
        )

        assert form.validate() == {"confirm_password": "Passwords do not match"}

    def test_existing_barber_needs_no_password(self):
        form = BarberForm({"id": 1, "name": "Ali", "email": "ali@example.com"})

        assert form.validate() == {}
        assert "password" not in form.record()

    def test_defaults(self):
        form = BarberForm()

        assert form.values["commission_rate"] == 50
        assert form.values["active"] is True


@pytest.mark.forms
class TestClientForm:

    def test_name_required(self):
        assert ClientForm().validate() == {"name": "Name is required"}

    def test_invalid_email_and_phone(self):
        form = ClientForm()
        form.update({"name": "Can", "email": "not-an-email", "phone": "call me"})

        errors = form.validate()

        assert errors["email"] == "Email is invalid"
        assert errors["phone"] == "Phone number is invalid"

    def test_valid_contact_details(self):
        form = ClientForm()
        form.update(
            {"name": "Can", "email": "can@example.com", "phone": "+90 (555) 123-4567"}
        )

        assert form.validate() == {}


@pytest.mark.forms
class TestServiceForm:

    def test_rejects_unknown_category_and_bad_numbers(self):
        form = ServiceForm()
        form.update(
            {
                "name": "Mystery",
                "category": "massage",
                "price": -5,
                "duration": 0,
                "discount_percentage": 120,
            }
        )

        errors = form.validate()

        assert set(errors) == {"category", "price", "duration", "discount_percentage"}

    def test_record_converts_types(self):
        form = ServiceForm()
        form.update({"name": "Beard Trim", "price": "60", "duration": "20", "category": "beard"})

        record = form.record()

        assert record["price"] == Decimal("60")
        assert record["duration"] == 20
        assert record["is_popular"] is False
