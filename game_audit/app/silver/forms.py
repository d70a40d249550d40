from flask_wtf import FlaskForm
from wtforms import StringField, SubmitField
from wtforms.validators import DataRequired, Length


class SlipScanForm(FlaskForm):
    slip_no = StringField('Slip code', validators=[DataRequired(), Length(max=32)])
    submit = SubmitField('Confirm payment')
