"""Error taxonomy shared by the repositories, the auth decorator and the handlers.

Each error carries the HTTP status and a message that is safe to show a
client. The boundary (REST blueprint or web blueprint) decides how to render
it; internal details are logged there and never echoed.
"""


class BlogError(Exception):
    status_code = 500
    message = 'internal server error'

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class NotFoundError(BlogError):
    status_code = 404
    message = 'the requested resource could not be found'


class ConflictError(BlogError):
    status_code = 409
    message = 'the resource has been modified, fetch it again'


class UnauthorizedError(BlogError):
    status_code = 401
    message = 'you are not allowed to do this operation'


class NoAuthorizationHeaderError(BlogError):
    status_code = 401
    message = 'no authorization header'


class InvalidTokenError(BlogError):
    status_code = 401
    message = 'invalid token'


class ExpiredTokenError(BlogError):
    status_code = 401
    message = 'your token has expired'


class DuplicateUsernameError(BlogError):
    status_code = 409

    def __init__(self, username):
        self.username = username
        super().__init__(f'username {username} already exists')


class InvalidInputError(BlogError):
    status_code = 400
    message = 'invalid input'


class CredentialVerificationError(BlogError):
    status_code = 500
    message = 'the password cannot be verified'


class InternalError(BlogError):
    pass


class PasswordHashingError(RuntimeError):
    """The hash primitive itself failed. Not a per-request error."""
