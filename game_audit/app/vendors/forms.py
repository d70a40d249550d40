import re

from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SelectField, SubmitField, ValidationError
from wtforms.validators import DataRequired, Length, Optional

from app.models.vendor import VENDOR_STATUSES

_NON_DIGITS = re.compile(r"\D")


def format_phone(raw):
    """Return ``NNN-NNN-NNNN`` for a ten digit number, otherwise ``None``."""
    digits = _NON_DIGITS.sub("", raw or "")
    if len(digits) != 10:
        return None
    return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"


class VendorForm(FlaskForm):
    vendor_id = StringField('Vendor ID', validators=[DataRequired(), Length(max=50)])
    name = StringField('Vendor name', validators=[DataRequired(), Length(max=150)])
    contact_person = StringField('Contact person', validators=[Optional(), Length(max=150)])
    phone = StringField('Phone', validators=[DataRequired()])
    address = StringField('Address', validators=[Optional(), Length(max=255)])
    status = SelectField('Status', choices=[(s, s) for s in VENDOR_STATUSES], default='Active')
    notes = TextAreaField('Notes', validators=[Optional()])
    submit = SubmitField('Save')
    delete = SubmitField('Delete')

    def validate_phone(self, field):
        formatted = format_phone(field.data)
        if formatted is None:
            raise ValidationError('Invalid phone number')
        field.data = formatted
