from flask_wtf import FlaskForm
from wtforms import HiddenField, SubmitField


class DecisionForm(FlaskForm):
    request_id = HiddenField()
    approve = SubmitField('Approve')
    reject = SubmitField('Reject')
