from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SelectField, HiddenField, SubmitField
from wtforms.validators import DataRequired, Email, Length, Optional

from app.utils.choices import optional_int


class UserForm(FlaskForm):
    id = HiddenField()
    name = StringField('Name', validators=[DataRequired(), Length(max=150)])
    email = StringField('Email', validators=[DataRequired(), Email(), Length(max=120)])
    password = PasswordField('Password', validators=[Optional()])
    role = SelectField('Role', choices=[])
    location_id = SelectField('Location', choices=[], coerce=optional_int, validate_choice=False)
    status = SelectField('Status', choices=[('Active', 'Active'), ('Inactive', 'Inactive')], default='Active')
    phone = StringField('Phone', validators=[Optional(), Length(max=20)])
    department = StringField('Department', validators=[Optional(), Length(max=100)])
    submit = SubmitField('Save')
    reset_password = SubmitField('Send reset link')
    delete = SubmitField('Delete')
