"""
Input validation for the JSON API, built on WTForms
"""
import math

from werkzeug.datastructures import MultiDict
from wtforms import Form, FloatField, IntegerField, StringField
from wtforms.validators import DataRequired, InputRequired, NumberRange, Optional, ValidationError as FieldError

from errors import ValidationError

MIN_YEAR = 2000
MAX_YEAR = 2100

# Closed list of categories offered by the client. The server stores whatever
# non-empty tag it is given.
EXPENSE_TYPES = [
    {"id": "food", "label": "Food"},
    {"id": "transport", "label": "Transport"},
    {"id": "shopping", "label": "Shopping"},
    {"id": "bills", "label": "Bills"},
    {"id": "entertainment", "label": "Entertainment"},
    {"id": "housing", "label": "Housing"},
    {"id": "education", "label": "Education"},
    {"id": "healthcare", "label": "Healthcare"},
    {"id": "travel", "label": "Travel"},
    {"id": "other", "label": "Other"},
]


def positive(form, field):
    if field.data is None or not math.isfinite(field.data) or field.data <= 0:
        raise FieldError("Amount must be positive")


class WholeNumberField(IntegerField):
    """IntegerField that also accepts whole-number floats such as 6.0"""

    def process_formdata(self, valuelist):
        if not valuelist:
            return
        try:
            number = float(valuelist[0])
        except ValueError as exc:
            self.data = None
            raise ValueError(self.gettext("Not a valid integer value.")) from exc
        if not number.is_integer():
            self.data = None
            raise ValueError(self.gettext("Not a valid integer value."))
        self.data = int(number)


class PeriodForm(Form):
    month = WholeNumberField("Month", validators=[InputRequired(), NumberRange(min=1, max=12)])
    year = WholeNumberField("Year", validators=[InputRequired(), NumberRange(min=MIN_YEAR, max=MAX_YEAR)])


class ExpenseForm(PeriodForm):
    amount = FloatField("Amount", validators=[InputRequired(), positive])
    type = StringField("Type", validators=[DataRequired(message="Please select an expense type")])
    remarks = StringField("Remarks", validators=[Optional()])


class ConnectForm(Form):
    spreadsheet_id = StringField(
        "Spreadsheet ID",
        name="spreadsheetId",
        validators=[DataRequired(message="Spreadsheet ID is required")],
    )


def to_formdata(payload, text_fields=()):
    """Flatten a JSON object into form data; nulls count as missing.

    Values for text_fields must be JSON strings, so 123 is not taken as "123".
    """
    if not isinstance(payload, dict):
        raise ValidationError("Validation error: request body must be a JSON object")

    formdata = MultiDict()
    for key, value in payload.items():
        if value is None:
            continue
        if isinstance(value, (dict, list)):
            raise ValidationError(f"Validation error: {key} must be a single value")
        if key in text_fields and not isinstance(value, str):
            raise ValidationError(f"Validation error: {key} must be a string")
        formdata.add(key, str(value))
    return formdata


def _error_message(form):
    problems = []
    for field_name, errors in form.errors.items():
        problems.append(f"{field_name}: {'; '.join(str(e) for e in errors)}")
    return "Validation error: " + ", ".join(problems)


def _validated(form_class, formdata):
    form = form_class(formdata=formdata)
    if not form.validate():
        raise ValidationError(_error_message(form))
    return form


def validate_expense(payload):
    """Returns the cleaned expense fields or raises ValidationError"""
    form = _validated(ExpenseForm, to_formdata(payload, text_fields=("type", "remarks")))
    return {
        "amount": form.amount.data,
        "type": form.type.data,
        "remarks": form.remarks.data or None,
        "month": form.month.data,
        "year": form.year.data,
    }


def validate_period(args):
    """month/year from a query string"""
    form = _validated(PeriodForm, args)
    return form.month.data, form.year.data


def validate_connect(payload):
    form = _validated(ConnectForm, to_formdata(payload, text_fields=("spreadsheetId",)))
    return form.spreadsheet_id.data
