"""Error taxonomy shared by the services and the HTTP boundary.

Each error carries the HTTP status code the API responds with. The message
is returned to clients verbatim under the ``message`` key.
"""


class RegistrationError(Exception):
    """Base class for errors surfaced to API clients"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(RegistrationError):
    """Malformed or out-of-range input (bad session, bad date, no filters)"""

    status_code = 400


class NotFoundError(RegistrationError):
    """No registration with the given id, or nothing to export"""

    status_code = 404


class ConflictError(RegistrationError):
    """A registration with the same normalized email already exists"""

    status_code = 409


class InternalError(RegistrationError):
    """Unexpected record store failure"""

    status_code = 500
