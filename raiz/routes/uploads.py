# raiz/routes/uploads.py
from flask import Blueprint, abort, send_from_directory

from raiz.services.storage_service import BUCKETS, StorageService

bp = Blueprint('uploads', __name__)


@bp.route('/uploads/<bucket>/<path:name>')
def serve(bucket, name):
    if bucket not in BUCKETS:
        abort(404)
    return send_from_directory(StorageService.bucket_path(bucket), name, max_age=3600)
