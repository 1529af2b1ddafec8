class BitfreezeException(Exception):
    """Base class for errors reported back to the caller."""

    status_code = 500

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class ValidationError(BitfreezeException):
    status_code = 400


class InsufficientFunds(BitfreezeException):
    status_code = 400


class Unauthorized(BitfreezeException):
    status_code = 401


class AdminForbidden(Unauthorized):
    status_code = 403


class NotFound(BitfreezeException):
    status_code = 404


class DuplicatePending(BitfreezeException):
    status_code = 409


class AlreadyProcessed(BitfreezeException):
    status_code = 409


class GatewayUnavailable(BitfreezeException):
    """Raised when the payment provider cannot be reached or rejects the call."""

    status_code = 502
