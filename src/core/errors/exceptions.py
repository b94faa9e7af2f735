from typing import Any


class CoreException(Exception):
    def __init__(
        self, message: str | None = None, additional_info: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.message = message
        self.additional_info = additional_info


class InfrastructureException(CoreException):
    pass


class UnsupportedAlgorithmException(CoreException):
    pass


class SigningFailedException(CoreException):
    pass


class UnauthorizedException(CoreException):
    pass


class MalformedTokenException(UnauthorizedException):
    pass


class AlgorithmMismatchException(UnauthorizedException):
    pass


class TokenExpiredException(UnauthorizedException):
    pass


class TokenNotYetActiveException(UnauthorizedException):
    pass


class InvalidSignatureException(UnauthorizedException):
    pass
