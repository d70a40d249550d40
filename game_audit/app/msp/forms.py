from flask_wtf import FlaskForm
from wtforms import StringField, FloatField, SelectField, HiddenField, SubmitField
from wtforms.fields import DateField
from wtforms.validators import DataRequired, InputRequired, Length, Optional, NumberRange

from app.models.msp import MSP_ENTRY_TYPES
from app.utils.choices import optional_int


class MspEntryForm(FlaskForm):
    id = HiddenField()
    entry_date = DateField('Date', validators=[DataRequired()])
    location_id = SelectField('Location', choices=[], coerce=optional_int, validate_choice=False)
    machine_no = StringField('Machine No', validators=[DataRequired(), Length(max=50)])
    entry_type = SelectField('Type', choices=[(t, t) for t in MSP_ENTRY_TYPES], default='MSP')
    amount = FloatField('Amount', validators=[InputRequired(), NumberRange(min=0)])
    remarks = StringField('Remarks', validators=[Optional(), Length(max=255)])
    submit = SubmitField('Save')
    delete = SubmitField('Delete')
