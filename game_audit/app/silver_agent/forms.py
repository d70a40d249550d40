from flask_wtf import FlaskForm
from wtforms import StringField, FloatField, SelectField, HiddenField, SubmitField
from wtforms.validators import Length, Optional, NumberRange

from app.models.silver import BONUS_TYPES
from app.utils.choices import optional_int, optional_str


class AgentSlipForm(FlaskForm):
    slip_no = HiddenField()
    slip_category = SelectField('Slip type', choices=[('regular', 'Regular'), ('bonus', 'Bonus')], default='regular')
    location_id = SelectField('Location', choices=[], coerce=optional_int, validate_choice=False)
    machine_no = StringField('Machine No', validators=[Optional(), Length(max=50)])
    amount = FloatField('Amount', validators=[Optional(), NumberRange(min=0)])
    bonus_type = SelectField('Bonus type', choices=[('', 'Select bonus')] + [(b, b) for b in BONUS_TYPES],
                             coerce=optional_str, validate_choice=False)
    bonus_amount = FloatField('Bonus amount', validators=[Optional(), NumberRange(min=0)])
    submit = SubmitField('Save slip')
    delete = SubmitField('Delete')
