# raiz/forms/profile_form.py
from flask_wtf import FlaskForm
from flask_wtf.file import FileField, FileRequired
from wtforms import StringField, SubmitField
from wtforms.validators import DataRequired, Length, Optional, Regexp

from raiz.forms.custom_register_form import POSTAL_CODE_PATTERN

# Fields a member may edit on their own profile
PROFILE_FIELDS = (
    'first_name', 'last_name', 'phone', 'postal_code', 'street', 'number',
    'complement', 'neighborhood', 'city', 'state',
)


class ProfileForm(FlaskForm):
    first_name = StringField('First name', validators=[DataRequired(), Length(max=100)])
    last_name = StringField('Last name', validators=[DataRequired(), Length(max=100)])
    phone = StringField('Mobile phone', validators=[Optional(), Length(max=30)])
    postal_code = StringField('CEP', validators=[
        Optional(),
        Regexp(POSTAL_CODE_PATTERN, message='CEP must use the format XXXXX-XXX'),
    ])
    street = StringField('Street', validators=[Optional(), Length(max=200)])
    number = StringField('Number', validators=[Optional(), Length(max=20)])
    complement = StringField('Complement', validators=[Optional(), Length(max=100)])
    neighborhood = StringField('Neighborhood', validators=[Optional(), Length(max=100)])
    city = StringField('City', validators=[Optional(), Length(max=100)])
    state = StringField('State', validators=[Optional(), Length(min=2, max=2)])
    submit = SubmitField('Save Changes')


class AvatarForm(FlaskForm):
    avatar = FileField('Profile photo', validators=[FileRequired(message='Choose an image to upload')])
    submit = SubmitField('Change Photo')
