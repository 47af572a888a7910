from sqlalchemy.exc import IntegrityError

from ..errors import ConflictError, DuplicateUsernameError, NotFoundError
from ..models import User, db
from ..passwords import hash_password


def create(session, username, password):
    """Insert a new user with a hashed password.

    Callers should look the username up first (see `get_by_username`) so a
    duplicate does not burn an id from the sequence; the unique constraint is
    still mapped to DuplicateUsernameError for the racing case.
    """
    user = User(username=username, hashed_password=hash_password(password), version=0)
    session.add(user)
    try:
        session.flush()
    except IntegrityError as e:
        session.rollback()
        raise DuplicateUsernameError(username) from e
    return user


def get(session, user_id):
    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError()
    return user


def get_by_username(session, username):
    user = session.scalars(db.select(User).filter_by(username=username)).first()
    if user is None:
        raise NotFoundError()
    return user


def update(session, user_id, version, username, hashed_password):
    """Conditional update on (id, version); bumps `version` by one."""
    stmt = (
        db.update(User)
        .where(User.id == user_id, User.version == version)
        .values(username=username, hashed_password=hashed_password, version=User.version + 1)
        .execution_options(synchronize_session=False)
    )
    try:
        result = session.execute(stmt)
    except IntegrityError as e:
        session.rollback()
        raise DuplicateUsernameError(username) from e

    if result.rowcount == 0:
        # Tell a missing row apart from a stale version.
        if session.get(User, user_id, populate_existing=True) is None:
            raise NotFoundError()
        raise ConflictError()

    return session.get(User, user_id, populate_existing=True)


def delete(session, user_id):
    result = session.execute(db.delete(User).where(User.id == user_id))
    return result.rowcount > 0
