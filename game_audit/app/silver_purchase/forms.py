from flask_wtf import FlaskForm
from wtforms import FloatField, SubmitField
from wtforms.fields import DateTimeLocalField
from wtforms.validators import DataRequired, NumberRange


class SilverPurchaseForm(FlaskForm):
    date_time = DateTimeLocalField('Date & time', format='%Y-%m-%dT%H:%M', validators=[DataRequired()])
    amount = FloatField('Amount', validators=[DataRequired(), NumberRange(min=0.01)])
    submit = SubmitField('Add purchase')
