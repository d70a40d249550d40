from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SelectField, SubmitField
from wtforms.fields import DateField
from wtforms.validators import DataRequired, Length, Optional

from app.models.machine import HEALTH_STATUSES
from app.utils.choices import optional_int, optional_str


class MachineForm(FlaskForm):
    machine_id = StringField('Machine ID', validators=[DataRequired(), Length(max=50)])
    machine_name = StringField('Machine name', validators=[DataRequired(), Length(max=150)])
    vendor_id = SelectField('Vendor', choices=[], coerce=optional_str, validate_choice=False)
    location_id = SelectField('Location', choices=[], coerce=optional_int, validate_choice=False)
    health_status = SelectField('Health', choices=[(s, s) for s in HEALTH_STATUSES], default='Good')
    last_service_date = DateField('Last service', validators=[Optional()])
    notes = TextAreaField('Notes', validators=[Optional()])
    submit = SubmitField('Save')
    delete = SubmitField('Delete')
