from functools import wraps
from flask import request

from ..data import tokens
from ..errors import (
    ExpiredTokenError,
    InvalidTokenError,
    NoAuthorizationHeaderError,
    NotFoundError,
    UnauthorizedError,
)
from ..models import db
from ..services.cleanup import cleanup_expired_tokens


def auth_required(f):
    """Resolve the bearer token and call the view with `current_user_id`."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get('Authorization')
        if not auth_header:
            raise NoAuthorizationHeaderError()

        scheme, sep, token_string = auth_header.partition(' ')
        if not sep:
            raise NoAuthorizationHeaderError()

        if scheme != 'Bearer':
            raise UnauthorizedError()

        try:
            token = tokens.lookup(db.session, token_string)
        except NotFoundError as e:
            raise InvalidTokenError() from e

        if tokens.is_expired(token):
            # Any expired token triggers a sweep of all of them; the outcome does not matter.
            cleanup_expired_tokens(db.session)
            raise ExpiredTokenError()

        return f(*args, current_user_id=token.user_id, **kwargs)

    return decorated_function
