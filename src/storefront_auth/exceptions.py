"""Authentication exceptions.

These exceptions are raised by the storefront_auth package and should be
caught and handled by the application layer. The token failure kinds are
for diagnostics only; callers collapse them into one user-facing outcome.
"""


class AuthError(Exception):
    """Base exception for all authentication errors."""

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


class InvalidTokenError(AuthError):
    """Raised when a signed token is invalid, expired, or malformed."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class MalformedTokenError(InvalidTokenError):
    """Raised when a token cannot be parsed into the expected structure."""

    def __init__(self, message: str = "Malformed token"):
        super().__init__(message)


class InvalidSignatureError(InvalidTokenError):
    """Raised when a token's signature does not match its contents."""

    def __init__(self, message: str = "Token signature verification failed"):
        super().__init__(message)


class TokenExpiredError(InvalidTokenError):
    """Raised when a correctly signed token is past its expiry."""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)


class InvalidPurposeError(InvalidTokenError):
    """Raised when a token was not issued for the workflow presenting it."""

    def __init__(self, message: str = "Token was issued for a different purpose"):
        super().__init__(message)


class TokenEncodingError(AuthError):
    """Raised when a claim set cannot be turned into a token."""

    def __init__(self, message: str = "Cannot encode token"):
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    """Raised when identifier or password is incorrect during login."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class CredentialNotFoundError(InvalidCredentialsError):
    """Raised when no credential is stored for an identifier."""


class CredentialMismatchError(InvalidCredentialsError):
    """Raised when a password does not match the stored hash."""


class CredentialChangedError(AuthError):
    """Raised when the stored password hash changed since it was read."""

    def __init__(self, subject_id: str):
        self.subject_id = subject_id
        super().__init__(f"Password hash changed concurrently for: {subject_id}")


class WeakPasswordError(AuthError):
    """Raised when a password doesn't meet strength requirements."""

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message)


class IdentifierAlreadyExistsError(AuthError):
    """Raised when registering an identifier that already has credentials."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Identifier already registered: {identifier}")


class InvalidResetTokenError(AuthError):
    """Raised when a password reset link is invalid, used or expired."""

    def __init__(self, message: str = "This link is invalid or has expired"):
        super().__init__(message)
