from datetime import date, datetime

from app.forms.base import BaseForm, to_int_or_blank
from app.models import APPOINTMENT_TYPES
from app.utils.dates import normalize_time, parse_date, time_slots
from app.utils.finance import compute_commission, money

# Derived from the selected service and barber; caller input is ignored
DERIVED_FIELDS = ("price", "duration", "commission_amount")


class AppointmentForm(BaseForm):
    """
    Booking form for appointments and walk-ins.

    Price and duration always come from the selected service. Commission is
    always recomputed from that price and the selected barber's rate; there
    is no manual override.
    """

    field_order = ("type", "barber_id", "service_id")

    def __init__(self, barbers, services, appointment=None, today=None):
        self.today = today or date.today()
        self.barbers = {b["id"]: b for b in barbers}
        self.services = {s["id"]: s for s in services}
        self._barber_list = list(barbers)
        self._service_list = list(services)
        super().__init__(appointment)

        if self.is_new:
            if self._barber_list and self.values["barber_id"] == "":
                self.change("barber_id", self._barber_list[0]["id"])
            if self._service_list and self.values["service_id"] == "":
                self.change("service_id", self._service_list[0]["id"])

    def default_values(self):
        return {
            "client_id": "",
            "barber_id": "",
            "service_id": "",
            "date": self.today.isoformat(),
            "time": "10:00",
            "status": "scheduled",
            "type": "appointment",
            "duration": 60,
            "price": money(0),
            "commission_amount": money(0),
            "notes": "",
            "walk_in_client_name": "",
        }

    def time_slots(self):
        return time_slots()

    def change(self, name, value):
        if name in DERIVED_FIELDS:
            return
        super().change(name, value)

    def _apply_service(self):
        service = self.services.get(self.values["service_id"])
        if service:
            self.values["price"] = money(service["price"])
            self.values["duration"] = service["duration"]

    def _recompute_commission(self):
        barber = self.barbers.get(self.values["barber_id"])
        if not barber:
            self.values["commission_amount"] = money(0)
            return
        self.values["commission_amount"] = compute_commission(
            self.values["price"] or 0, barber["commission_rate"]
        )

    def on_change(self, name, value):
        if name == "type":
            # Switching type starts the client selection over
            self.values["client_id"] = ""
            self.values["walk_in_client_name"] = ""
        elif name in ("client_id", "barber_id", "service_id"):
            self.values[name] = to_int_or_blank(value)
            if name == "service_id":
                self._apply_service()
                self._recompute_commission()
            elif name == "barber_id":
                self._recompute_commission()

    def _check_selections(self, errors):
        barber_id = self.values["barber_id"]
        if barber_id in ("", None):
            errors["barber_id"] = "Barber is required"
        elif barber_id not in self.barbers:
            errors["barber_id"] = "Selected barber is not available"

        service_id = self.values["service_id"]
        if service_id in ("", None):
            errors["service_id"] = "Service is required"
        elif service_id not in self.services:
            errors["service_id"] = "Selected service does not exist"

    def _check_schedule(self, errors, required=True):
        if not self.values["date"]:
            if required:
                errors["date"] = "Date is required"
        else:
            try:
                parse_date(self.values["date"])
            except (TypeError, ValueError):
                errors["date"] = "Date must be YYYY-MM-DD"

        if not self.values["time"]:
            if required:
                errors["time"] = "Time is required"
        else:
            try:
                normalize_time(self.values["time"])
            except (TypeError, ValueError):
                errors["time"] = "Time must be HH:MM"

    def check(self):
        errors = {}
        if self.values["client_id"] in ("", None):
            if self.values["type"] == "walk-in":
                errors["client_id"] = "For walk-ins, a client must be selected."
            else:
                errors["client_id"] = "Client is required"
        self._check_selections(errors)
        self._check_schedule(errors)
        if self.values["type"] not in APPOINTMENT_TYPES:
            errors["type"] = "Invalid appointment type"
        return errors

    def record(self):
        record = dict(self.values)
        record["updated_at"] = datetime.now().isoformat()
        if self.is_new:
            record.pop("id", None)
        if record["type"] == "walk-in":
            record["walk_in_client_name"] = None
        return record


class WalkInForm(AppointmentForm):
    """Quick entry for a client who walked in: type is fixed, time defaults to now."""

    def __init__(self, barbers, services, now=None):
        self.now = now or datetime.now()
        active = [b for b in barbers if b.get("active", True)]
        super().__init__(active, services, today=self.now.date())

    def default_values(self):
        values = super().default_values()
        values["type"] = "walk-in"
        values["time"] = self.now.strftime("%H:%M")
        return values

    def change(self, name, value):
        if name == "type":
            return
        super().change(name, value)

    def check(self):
        errors = {}
        if self.values["client_id"] in ("", None):
            errors["client_id"] = "For walk-ins, a client must be selected."
        self._check_selections(errors)
        # Date and time default to now; only a malformed value is an error
        self._check_schedule(errors, required=False)
        return errors
