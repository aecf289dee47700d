# raiz/forms/custom_login_form.py
from flask_security.forms import LoginForm
from flask import current_app


class CustomLoginForm(LoginForm):
    """Login form that logs failed attempts."""

    def validate(self, extra_validators=None):
        result = super().validate(extra_validators=extra_validators)

        if not result and ('email' in self.errors or 'password' in self.errors):
            current_app.logger.info(f"Failed login attempt for '{self.email.data}'")

        return result
