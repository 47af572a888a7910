# shapeless_blog/routes/__init__.py
from flask import Blueprint, jsonify, current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from sqlalchemy.exc import SQLAlchemyError

from ..errors import BlogError, InternalError
from ..models import db

# Initialise Blueprint for the JSON API
api_bp = Blueprint('api', __name__, url_prefix='/api')
limiter = Limiter(get_remote_address)


def auth_rate_limit():
    return current_app.config['AUTH_RATE_LIMIT']


@api_bp.errorhandler(BlogError)
def handle_blog_error(e):
    if e.status_code >= 500:
        current_app.logger.error(f"{type(e).__name__}: {e.__cause__ or e}")
    return jsonify({'error': e.message}), e.status_code


@api_bp.errorhandler(SQLAlchemyError)
def handle_database_error(e):
    db.session.rollback()
    error = InternalError()
    error.__cause__ = e
    return handle_blog_error(error)


from . import blogs, users  # noqa: E402,F401  (registers the views on api_bp)
