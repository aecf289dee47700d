# raiz/forms/project_form.py
from datetime import date

from flask_wtf import FlaskForm
from flask_wtf.file import FileField
from wtforms import DateField, IntegerField, StringField, SubmitField, TextAreaField, ValidationError
from wtforms.validators import URL, DataRequired, Length, NumberRange, Optional

from raiz.services.funding import MAX_TOKEN_AMOUNT


class ProjectForm(FlaskForm):
    """Proposal form for a new community project."""
    title = StringField('Title', validators=[DataRequired(), Length(max=200)])
    description = TextAreaField('Description', validators=[DataRequired()])
    video_url = StringField('YouTube link', validators=[
        Optional(),
        URL(message='Enter a valid video URL'),
        Length(max=500),
    ])
    goal_tokens = IntegerField('Token goal', validators=[
        DataRequired(),
        NumberRange(min=1, max=MAX_TOKEN_AMOUNT,
                    message=f'The goal must be between 1 and {MAX_TOKEN_AMOUNT} tokens'),
    ])
    neighborhood = StringField('Neighborhood', validators=[DataRequired(), Length(max=100)])
    deadline = DateField('Deadline', validators=[DataRequired()])
    image = FileField('Project image (optional)')
    submit = SubmitField('Create Project')

    def validate_deadline(self, field):
        if field.data and field.data < date.today():
            raise ValidationError('The deadline cannot be in the past')
