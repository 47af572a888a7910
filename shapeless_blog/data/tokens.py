import secrets
from datetime import timedelta

from sqlalchemy.exc import IntegrityError

from ..errors import NotFoundError
from ..models import Token, as_utc, db, utcnow

DEFAULT_TTL = timedelta(hours=24)


def generate_token():
    return secrets.token_hex(32)  # 64-character hex string


def issue(session, user_id, ttl=DEFAULT_TTL):
    token = Token(user_id=user_id, token=generate_token(), expired_time=utcnow() + ttl)
    session.add(token)
    try:
        session.flush()
    except IntegrityError as e:
        # user_id does not reference an existing user
        session.rollback()
        raise NotFoundError() from e
    return token


def lookup(session, token_string):
    token = session.get(Token, token_string)
    if token is None:
        raise NotFoundError()
    return token


def is_expired(token):
    return utcnow() >= as_utc(token.expired_time)


def sweep_expired(session):
    """Delete every expired token. Returns True if anything was removed."""
    result = session.execute(
        db.delete(Token)
        .where(Token.expired_time < utcnow())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0


def delete_all_for_user(session, user_id):
    result = session.execute(
        db.delete(Token)
        .where(Token.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0
