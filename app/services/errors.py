"""Service-layer errors tagged with a string code; route handlers map codes to HTTP statuses."""

EMAIL_IN_USE = "EMAIL_IN_USE"
INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
USER_NOT_FOUND = "USER_NOT_FOUND"
INVALID_TOKEN = "INVALID_TOKEN"


class ServiceError(Exception):
    """Business-rule failure identified by `code` (one of the tags above)."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(message)


class EmailInUseError(ServiceError):
    def __init__(self, message: str = "Email already in use") -> None:
        super().__init__(EMAIL_IN_USE, message)


class InvalidCredentialsError(ServiceError):
    """Unknown email and wrong password raise the same error (no user enumeration)."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(INVALID_CREDENTIALS, message)


class UserNotFoundError(ServiceError):
    def __init__(self, message: str = "User not found") -> None:
        super().__init__(USER_NOT_FOUND, message)


class InvalidTokenError(ServiceError):
    def __init__(self, message: str = "Invalid refresh token") -> None:
        super().__init__(INVALID_TOKEN, message)
