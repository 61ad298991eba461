import logging
import smtplib

from storefront_auth import (
    CredentialChangedError,
    CredentialData,
    CredentialRepository,
    InvalidResetTokenError,
    InvalidTokenError,
    PasswordHashingService,
    ResetTokenManager,
    TokenClaims,
)
from storefront_identity.infrastructure.email import EmailService

logger = logging.getLogger(__name__)


class PasswordResetService:
    """Service for handling password reset requests and token validation."""

    RESET_PATH = "/password-reset"

    def __init__(
        self,
        credential_repository: CredentialRepository,
        reset_token_manager: ResetTokenManager,
        password_service: PasswordHashingService,
        email_service: EmailService,
        app_base_url: str,
    ):
        self._credential_repo = credential_repository
        self._reset_tokens = reset_token_manager
        self._password_service = password_service
        self._email_service = email_service
        self._app_base_url = app_base_url.rstrip("/")

    def build_reset_link(self, token: str) -> str:
        # Token segments are base64url joined by dots: path-safe as is
        return f"{self._app_base_url}{self.RESET_PATH}/{token}"

    async def request_reset(self, email: str) -> None:
        credential = await self._credential_repo.find_by_identifier(email)
        if credential is None:
            # Silent no-op to prevent account enumeration
            logger.debug("Password reset requested for unknown email")
            return

        token = self._reset_tokens.issue_reset_token(
            credential.subject_id,
            fingerprint=self._reset_tokens.fingerprint_for(credential.password_hash),
        )
        reset_link = self.build_reset_link(token)

        try:
            self._email_service.send_password_reset_email(email, reset_link)
            logger.info("Password reset email sent for %s", credential.subject_id)
        except (smtplib.SMTPException, OSError) as e:
            # The caller answers the same either way
            logger.error("Failed to send password reset email: %s", e)

    async def _verify(self, token: str) -> tuple[TokenClaims, CredentialData]:
        try:
            claims = self._reset_tokens.decode_reset_token(token)
        except InvalidTokenError as e:
            logger.info("Rejected password reset token: %s", type(e).__name__)
            raise InvalidResetTokenError from e

        credential = await self._credential_repo.find_by_subject_id(claims.subject_id)
        if credential is None:
            logger.info("Password reset token for missing subject: %s", claims.subject_id)
            raise InvalidResetTokenError

        if not self._reset_tokens.is_current(claims, credential.password_hash):
            logger.info(
                "Rejected consumed password reset token for %s", claims.subject_id
            )
            raise InvalidResetTokenError

        return claims, credential

    async def check_link(self, token: str) -> bool:
        try:
            await self._verify(token)
        except InvalidResetTokenError:
            return False
        return True

    async def reset_password(self, token: str, new_password: str) -> None:
        claims, credential = await self._verify(token)

        self._password_service.validate_strength(new_password)
        # A fresh bcrypt salt changes the stored hash, which retires this
        # token and every other reset token issued for the subject. Only
        # the first of two concurrent uses of one token can swap it.
        try:
            await self._credential_repo.update_password_hash(
                claims.subject_id,
                self._password_service.hash(new_password),
                expected_hash=credential.password_hash,
            )
        except CredentialChangedError as e:
            logger.info(
                "Rejected consumed password reset token for %s", claims.subject_id
            )
            raise InvalidResetTokenError from e
        logger.info("Password reset completed for %s", claims.subject_id)
