from flask_wtf import FlaskForm
from wtforms import StringField, FloatField, HiddenField, SubmitField
from wtforms.fields import DateField
from wtforms.validators import DataRequired, Length, Optional, NumberRange


class AuditEntryForm(FlaskForm):
    id = HiddenField()
    machine_no = StringField('Machine No', validators=[DataRequired(), Length(max=50)])
    entry_date = DateField('Date', validators=[DataRequired()])
    prev_in = FloatField('Previous In', validators=[Optional(), NumberRange(min=0)])
    prev_out = FloatField('Previous Out', validators=[Optional(), NumberRange(min=0)])
    cur_in = FloatField('Current In', validators=[Optional(), NumberRange(min=0)])
    cur_out = FloatField('Current Out', validators=[Optional(), NumberRange(min=0)])
    jackpot = FloatField('Jackpot', validators=[Optional(), NumberRange(min=0)])
    submit = SubmitField('Save')
    delete = SubmitField('Delete')
