from app.forms.base import BaseForm, to_decimal_or_none
from app.models import SERVICE_CATEGORIES


class ServiceForm(BaseForm):
    def default_values(self):
        return {
            "name": "",
            "description": "",
            "duration": 30,
            "price": 0,
            "is_popular": False,
            "category": "haircut",
            "discount_percentage": None,
            "image_key": None,
        }

    def check(self):
        errors = {}
        if not str(self.values["name"] or "").strip():
            errors["name"] = "Name is required"

        price = to_decimal_or_none(self.values["price"])
        if price is None or price < 0:
            errors["price"] = "Price must be zero or more"

        try:
            duration = int(self.values["duration"])
        except (TypeError, ValueError):
            duration = 0
        if duration <= 0:
            errors["duration"] = "Duration must be a positive number of minutes"

        if self.values["category"] not in SERVICE_CATEGORIES:
            errors["category"] = "Category must be one of: " + ", ".join(
                SERVICE_CATEGORIES
            )

        discount = self.values["discount_percentage"]
        if discount not in (None, ""):
            value = to_decimal_or_none(discount)
            if value is None or value < 0 or value > 100:
                errors["discount_percentage"] = "Discount must be between 0 and 100"
        return errors

    def record(self):
        record = dict(self.values)
        record["price"] = to_decimal_or_none(record["price"])
        record["duration"] = int(record["duration"])
        record["is_popular"] = bool(record["is_popular"])
        record["discount_percentage"] = to_decimal_or_none(
            record["discount_percentage"]
        )
        if self.is_new:
            record.pop("id", None)
        return record
