from flask_wtf import FlaskForm
from wtforms import StringField, HiddenField, SubmitField
from wtforms.validators import DataRequired, Length, Optional


class LocationForm(FlaskForm):
    id = HiddenField()
    code = StringField('Code', validators=[Optional(), Length(max=20)])
    name = StringField('Name', validators=[DataRequired(), Length(max=150)])
    address = StringField('Address', validators=[Optional(), Length(max=255)])
    city = StringField('City', validators=[DataRequired(), Length(max=100)])
    state = StringField('State', validators=[Optional(), Length(max=100)])
    country = StringField('Country', validators=[DataRequired(), Length(max=100)])
    contact_person = StringField('Contact person', validators=[Optional(), Length(max=150)])
    contact_phone = StringField('Contact phone', validators=[Optional(), Length(max=20)])
    submit = SubmitField('Save')
    delete = SubmitField('Delete')
