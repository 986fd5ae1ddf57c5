"""
Server-side form objects.

A form holds in-progress values, derives dependent fields when a value
changes, validates, and hands an assembled record to a submit callback.

States: unedited -> validating -> rejected | submitted. A rejected form
keeps its values and can be changed and submitted again.
"""
from decimal import Decimal, InvalidOperation
from enum import Enum


class FormState(str, Enum):
    UNEDITED = "unedited"
    VALIDATING = "validating"
    REJECTED = "rejected"
    SUBMITTED = "submitted"


def to_int_or_blank(value):
    if value in (None, ""):
        return ""
    try:
        return int(value)
    except (TypeError, ValueError):
        return value


def to_decimal_or_none(value):
    if value in (None, ""):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


class BaseForm:
    # Fields applied first by update(); later fields may depend on them
    field_order = ()

    def __init__(self, initial=None):
        self.values = self.default_values()
        self.is_new = True
        if initial:
            self.is_new = initial.get("id") is None
            self.values.update(
                {k: v for k, v in initial.items() if k in self.values or k == "id"}
            )
        self.errors = {}
        self.state = FormState.UNEDITED

    def default_values(self):
        return {}

    def on_change(self, name, value):
        """Hook for derived fields."""

    def change(self, name, value):
        if name in self.values and self.values[name] == value:
            return
        self.values[name] = value
        self.errors.pop(name, None)
        self.on_change(name, value)
        if self.state == FormState.SUBMITTED:
            self.state = FormState.UNEDITED

    def update(self, data):
        ordered = [k for k in self.field_order if k in data]
        ordered += [k for k in data if k not in self.field_order]
        for name in ordered:
            self.change(name, data[name])

    def check(self):
        return {}

    def validate(self):
        self.errors = self.check()
        return self.errors

    def is_valid(self):
        return not self.validate()

    def record(self):
        return dict(self.values)

    def submit(self, on_submit):
        """
        Validate, then call on_submit(record) only when there are no errors.
        A callback that raises, or returns {"success": False, ...}, leaves the
        form rejected; exceptions propagate to the caller.
        """
        self.state = FormState.VALIDATING
        if self.validate():
            self.state = FormState.REJECTED
            return None

        try:
            result = on_submit(self.record())
        except Exception:
            self.state = FormState.REJECTED
            raise

        if isinstance(result, dict) and result.get("success") is False:
            self.state = FormState.REJECTED
        else:
            self.state = FormState.SUBMITTED
        return result
