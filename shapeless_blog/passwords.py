from werkzeug.security import check_password_hash, generate_password_hash

from .errors import CredentialVerificationError, PasswordHashingError

HASH_METHOD = 'pbkdf2:sha256'


def hash_password(password):
    """Salted one-way hash of `password`.

    Raises PasswordHashingError when the primitive fails; callers treat that
    as a broken deployment, not as a bad request.
    """
    try:
        return generate_password_hash(password, method=HASH_METHOD)
    except (TypeError, ValueError) as e:
        raise PasswordHashingError(f'cannot hash password: {e}') from e


def verify_password(password, hashed_password):
    if not isinstance(hashed_password, str) or hashed_password.count('$') < 2:
        raise CredentialVerificationError()

    try:
        return check_password_hash(hashed_password, password)
    except ValueError as e:
        # unknown hash method
        raise CredentialVerificationError() from e


def check_hasher():
    """Hash and verify a throwaway value so a broken primitive fails at startup."""
    probe = hash_password('startup-probe')
    if not verify_password('startup-probe', probe):
        raise PasswordHashingError('password hasher failed its self-check')
