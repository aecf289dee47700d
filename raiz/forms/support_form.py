# raiz/forms/support_form.py
from flask_wtf import FlaskForm
from wtforms import IntegerField, SubmitField
from wtforms.validators import DataRequired, NumberRange

from raiz.services.funding import MAX_TOKEN_AMOUNT


class SupportForm(FlaskForm):
    """How many tokens to pledge to a project."""
    tokens = IntegerField('Tokens', validators=[
        DataRequired(message='Enter how many tokens you want to give'),
        NumberRange(min=1, max=MAX_TOKEN_AMOUNT,
                    message=f'Support must be between 1 and {MAX_TOKEN_AMOUNT} tokens'),
    ])
    submit = SubmitField('Support Project')
