# services/errors.py


class PortalError(Exception):
    """Base class for every error the services raise on purpose."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PortalError):
    status_code = 400


class DuplicateKeyError(PortalError):
    status_code = 400


class NotFoundError(PortalError):
    status_code = 404


class InvalidCredentials(PortalError):
    status_code = 401

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class LifecycleError(PortalError):
    """An assignment was asked to make a transition its state does not allow."""

    status_code = 409


class FormatError(PortalError):
    status_code = 400


class ReadError(PortalError):
    status_code = 400
