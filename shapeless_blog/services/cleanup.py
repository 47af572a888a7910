from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..data import tokens


def cleanup_expired_tokens(session):
    """Remove expired tokens. Best effort: database errors are logged, not raised."""
    try:
        removed = tokens.sweep_expired(session)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        current_app.logger.warning(f"Expired token sweep failed: {str(e)}")
        return False

    if removed:
        current_app.logger.info("Removed expired tokens.")
    return removed
