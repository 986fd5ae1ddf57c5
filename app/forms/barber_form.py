from datetime import date

from app.forms.base import BaseForm, to_decimal_or_none, to_int_or_blank


class BarberForm(BaseForm):
    def default_values(self):
        return {
            "name": "",
            "email": "",
            "phone": "",
            "age": None,
            "specialty": "",
            "bio": "",
            "photo_url": "",
            "commission_rate": 50,
            "active": True,
            "join_date": date.today().isoformat(),
            "password": "",
            "confirm_password": "",
        }

    def check(self):
        errors = {}
        if not str(self.values["name"] or "").strip():
            errors["name"] = "Name is required"
        if not str(self.values["email"] or "").strip():
            errors["email"] = "Email is required"

        rate = to_decimal_or_none(self.values["commission_rate"])
        if rate is None or rate < 0 or rate > 100:
            errors["commission_rate"] = "Commission rate must be between 0 and 100"

        if self.is_new and not self.values["password"]:
            errors["password"] = "Password is required for new barbers"
        if self.values["password"] and (
            self.values["password"] != self.values["confirm_password"]
        ):
            errors["confirm_password"] = "Passwords do not match"
        return errors

    def record(self):
        record = dict(self.values)
        record.pop("confirm_password", None)
        if not record.get("password"):
            record.pop("password", None)
        record["commission_rate"] = to_decimal_or_none(record["commission_rate"])
        age = to_int_or_blank(record.get("age"))
        record["age"] = age if isinstance(age, int) else None
        if self.is_new:
            record.pop("id", None)
        return record
