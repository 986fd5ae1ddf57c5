import re

from app.forms.base import BaseForm, to_int_or_blank

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
PHONE_PATTERN = re.compile(r"^[0-9+\-\s()]+$")


class ClientForm(BaseForm):
    def default_values(self):
        return {
            "name": "",
            "email": "",
            "phone": "",
            "preferred_barber_id": "",
            "notes": "",
        }

    def on_change(self, name, value):
        if name == "preferred_barber_id":
            self.values[name] = to_int_or_blank(value)

    def check(self):
        errors = {}
        if not str(self.values["name"] or "").strip():
            errors["name"] = "Name is required"
        email = self.values["email"]
        if email and not EMAIL_PATTERN.search(email):
            errors["email"] = "Email is invalid"
        phone = self.values["phone"]
        if phone and not PHONE_PATTERN.match(phone):
            errors["phone"] = "Phone number is invalid"
        return errors

    def record(self):
        record = dict(self.values)
        record["preferred_barber_id"] = record["preferred_barber_id"] or None
        if self.is_new:
            record.pop("id", None)
        return record
