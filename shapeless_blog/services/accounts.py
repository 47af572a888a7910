from datetime import timedelta

from flask import current_app

from ..data import tokens, users
from ..errors import DuplicateUsernameError, NotFoundError, UnauthorizedError
from ..passwords import hash_password, verify_password
from .blog_writer import transaction


def register_user(session, username, password):
    # Look the name up first so a failed insert does not use up an id.
    try:
        existing = users.get_by_username(session, username)
    except NotFoundError:
        with transaction(session):
            user = users.create(session, username, password)
        current_app.logger.info(f"User {username} created with id {user.id}")
        return user
    raise DuplicateUsernameError(existing.username)


def authenticate(session, username, password, ttl=None):
    """Check credentials and issue a bearer token.

    Unknown usernames raise NotFoundError, a wrong password UnauthorizedError.
    """
    user = users.get_by_username(session, username)

    if not verify_password(password, user.hashed_password):
        current_app.logger.warning(f"Failed login attempt for {username}")
        raise UnauthorizedError()

    if ttl is None:
        ttl = timedelta(hours=current_app.config['TOKEN_TTL_HOURS'])

    with transaction(session):
        token = tokens.issue(session, user.id, ttl)
    current_app.logger.info(f"Login successful for {username}")
    return token


def update_account(session, current_user_id, user_id, username=None, password=None, version=None):
    if user_id != current_user_id:
        raise UnauthorizedError()

    with transaction(session):
        user = users.get(session, user_id)
        new_username = user.username if username is None else username
        if new_username != user.username:
            try:
                users.get_by_username(session, new_username)
            except NotFoundError:
                pass
            else:
                raise DuplicateUsernameError(new_username)

        hashed = user.hashed_password if password is None else hash_password(password)
        expected = user.version if version is None else version
        updated = users.update(session, user_id, expected, new_username, hashed)
    return updated
