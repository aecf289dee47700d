# raiz/forms/custom_register_form.py
"""Registration form carrying the member's profile and address fields."""

from flask_security.forms import RegisterForm
from wtforms import DateField, PasswordField, StringField, SubmitField
from wtforms.validators import DataRequired, EqualTo, Length, Optional, Regexp

CPF_PATTERN = r'^\d{3}\.\d{3}\.\d{3}-\d{2}$'
POSTAL_CODE_PATTERN = r'^\d{5}-?\d{3}$'


class CustomRegisterForm(RegisterForm):
    """Sign-up form.

    Field names match ``User`` columns so Flask-Security copies them onto the
    new account when it calls ``form.to_dict(only_user=True)``.
    """

    first_name = StringField('First name', validators=[DataRequired(), Length(max=100)])
    last_name = StringField('Last name', validators=[DataRequired(), Length(max=100)])
    cpf = StringField('CPF', validators=[
        DataRequired(),
        Regexp(CPF_PATTERN, message='CPF must use the format XXX.XXX.XXX-XX'),
    ])
    phone = StringField('Mobile phone', validators=[DataRequired(), Length(max=30)])
    birth_date = DateField('Birth date', validators=[DataRequired()])
    postal_code = StringField('CEP', validators=[
        DataRequired(),
        Regexp(POSTAL_CODE_PATTERN, message='CEP must use the format XXXXX-XXX'),
    ])
    street = StringField('Street', validators=[DataRequired(), Length(max=200)])
    number = StringField('Number', validators=[DataRequired(), Length(max=20)])
    complement = StringField('Complement', validators=[Optional(), Length(max=100)])
    neighborhood = StringField('Neighborhood', validators=[DataRequired(), Length(max=100)])
    city = StringField('City', validators=[DataRequired(), Length(max=100)])
    state = StringField('State', validators=[DataRequired(), Length(min=2, max=2)])

    password_confirm = PasswordField('Confirm Password', validators=[
        DataRequired(message='Please confirm your password'),
        EqualTo('password', message='Passwords must match'),
    ])

    submit = SubmitField('Create Account')
