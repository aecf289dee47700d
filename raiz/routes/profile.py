# raiz/routes/profile.py
from flask import Blueprint, current_app, flash, redirect, render_template, url_for
from flask_security import current_user, login_required
from sqlalchemy.exc import SQLAlchemyError

from raiz import db
from raiz.forms.profile_form import PROFILE_FIELDS, AvatarForm, ProfileForm
from raiz.routes.dashboard import flash_form_errors
from raiz.services.project_service import invalidate_listing
from raiz.services.storage_service import AVATARS_BUCKET, StorageError, StorageService

bp = Blueprint('profile', __name__)


@bp.route('/perfil', methods=['GET', 'POST'])
@login_required
def profile():
    form = ProfileForm(obj=current_user)
    if form.validate_on_submit():
        for field in PROFILE_FIELDS:
            setattr(current_user, field, getattr(form, field).data)
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Error updating profile of user {current_user.id}: {e}")
            flash('Error updating profile.', 'danger')
        else:
            # Owner names appear on the public project cards
            invalidate_listing()
            flash('Profile updated successfully!', 'success')
            return redirect(url_for('profile.profile'))
    elif form.is_submitted():
        flash_form_errors(form)

    return render_template('profile.html', form=form, avatar_form=AvatarForm())


@bp.route('/perfil/avatar', methods=['POST'])
@login_required
def avatar():
    form = AvatarForm()
    if not form.validate_on_submit():
        flash_form_errors(form)
        return redirect(url_for('profile.profile'))

    try:
        current_user.avatar_url = StorageService.upload_public(
            AVATARS_BUCKET, form.avatar.data, owner_id=current_user.id
        )
        db.session.commit()
    except StorageError as e:
        current_app.logger.info(f"Avatar from user {current_user.id} refused: {e}")
        flash(f"Error uploading photo: {e}", 'danger')
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error saving avatar of user {current_user.id}: {e}")
        flash('Error uploading photo.', 'danger')
    else:
        flash('Profile photo updated successfully!', 'success')
    return redirect(url_for('profile.profile'))
