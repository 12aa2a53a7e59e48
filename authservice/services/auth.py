"""
Authentication service for the auth service.
Composes the password hasher, token issuer, session store, login-attempt
tracker and user repository into the sign-up, login, token validation,
password reset, refresh and logout flows.
"""

import asyncio
import logging
from typing import Dict, Optional

from authservice.core.config import Settings
from authservice.core.constants import InputLimit, LoginFailureReason, ResponseMessage, TokenType
from authservice.core.exceptions import (
    AccountDisabledException,
    AccountLockedException,
    AuthServiceError,
    DuplicateResourceError,
    InvalidCredentialsException,
    InvalidHashFormatError,
    InvalidTokenException,
    RepositoryError,
    StoreError,
    TokenError,
    ValidationError,
)
from authservice.core.security import PasswordHasher, TokenIssuer, generate_secure_token
from authservice.schemas.auth import (
    LoginResponse,
    MessageResponse,
    SignUpResponse,
    ValidateTokenResponse,
)
from authservice.schemas.user import UserSummary
from authservice.services.notification import ResetNotifier, default_reset_notifier
from authservice.services.rate_limit import LoginAttemptTracker
from authservice.services.session_store import SessionStore
from authservice.services.user import UserRecord, UserRepository
from authservice.utils.validators import (
    ensure_valid,
    normalize_email,
    validate_email,
    validate_login_password,
    validate_name,
    validate_password,
    validate_token,
)


logger = logging.getLogger("authservice.auth")


class AuthService:
    """
    Service class for authentication operations.

    Holds only its injected collaborators, so one instance is shared by every
    request. Input is validated before any store or repository access.
    """

    def __init__(
        self,
        settings: Settings,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        store: SessionStore,
        tracker: LoginAttemptTracker,
        users: UserRepository,
        notifier: Optional[ResetNotifier] = None
    ):
        """
        Initialize authentication service.

        Args:
            settings: Application settings
            hasher: Argon2id password hasher
            issuer: RS256 token issuer/validator
            store: Session store for refresh and reset records
            tracker: Failed-login tracker
            users: User repository
            notifier: Receives password reset tokens; defaults by environment
        """
        self.settings = settings
        self.hasher = hasher
        self.issuer = issuer
        self.store = store
        self.tracker = tracker
        self.users = users
        self.notifier = notifier or default_reset_notifier(settings)
        self._dummy_hash: Optional[str] = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: SessionStore,
        users: UserRepository,
        notifier: Optional[ResetNotifier] = None
    ) -> "AuthService":
        """Build the service and its crypto collaborators from settings."""
        return cls(
            settings=settings,
            hasher=PasswordHasher.from_settings(settings),
            issuer=TokenIssuer.from_settings(settings),
            store=store,
            tracker=LoginAttemptTracker.from_settings(store, settings),
            users=users,
            notifier=notifier
        )

    @property
    def access_token_expires_in(self) -> int:
        return int(self.issuer.access_token_ttl.total_seconds())

    async def _hash_password(self, password: str) -> str:
        # Argon2 is CPU and memory bound; keep it off the event loop
        return await asyncio.to_thread(self.hasher.hash, password)

    async def _verify_password(self, password: str, encoded: str) -> bool:
        return await asyncio.to_thread(self.hasher.verify, password, encoded)

    async def _burn_verify(self, password: str) -> None:
        """Run one Argon2 verify so unknown emails cost as much as known ones."""
        if self._dummy_hash is None:
            self._dummy_hash = await self._hash_password(generate_secure_token(16))
        await self._verify_password(password, self._dummy_hash)

    async def _issue_tokens(self, user: UserRecord) -> LoginResponse:
        """
        Mint an access/refresh pair and persist the refresh record.

        Raises:
            InternalError: If signing fails or the refresh record cannot be
                stored (a refresh token that cannot be revoked is never issued)
        """
        access_token = self.issuer.create_access_token(user.id, user.email)
        refresh_token = self.issuer.create_refresh_token(user.id)
        jti = self.issuer.get_token_id(refresh_token)

        try:
            await self.store.set_refresh_token(jti, user.id, self.issuer.refresh_token_ttl)
        except StoreError:
            logger.error(f"Could not persist refresh token for user {user.id}; refusing to issue tokens")
            raise

        return LoginResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="bearer",
            expires_in=self.access_token_expires_in,
            user=UserSummary.model_validate(user)
        )

    async def sign_up(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str
    ) -> SignUpResponse:
        """
        Register a new user.

        Args:
            email: User email
            password: Plain text password
            first_name: First name
            last_name: Last name

        Returns:
            SignUpResponse with the created user's summary

        Raises:
            ValidationError: If any field is invalid
            DuplicateResourceError: If the email is already registered
        """
        ensure_valid(
            validate_email(email),
            validate_password(password),
            validate_name(first_name, "first_name"),
            validate_name(last_name, "last_name")
        )
        email = normalize_email(email)

        if await self.users.email_exists(email):
            raise DuplicateResourceError(ResponseMessage.EMAIL_ALREADY_EXISTS)

        password_hash = await self._hash_password(password)
        user = await self.users.create(
            email=email,
            password_hash=password_hash,
            first_name=first_name.strip(),
            last_name=last_name.strip()
        )
        logger.info(f"User registered: {user.id}")

        return SignUpResponse(
            success=True,
            message=ResponseMessage.REGISTER_SUCCESS,
            user=UserSummary.model_validate(user)
        )

    async def login(self, email: str, password: str) -> LoginResponse:
        """
        Authenticate user with email and password.

        Steps:
        1. Refuse locked identities
        2. Look up the user (lookup failures look like bad credentials)
        3. Refuse disabled accounts
        4. Verify the password, counting failures
        5. Issue tokens

        Raises:
            ValidationError: If input is malformed
            AccountLockedException: If too many failures were recorded
            AccountDisabledException: If the account is inactive
            InvalidCredentialsException: On unknown email or wrong password
            InternalError: On hash, signing or store failures
        """
        ensure_valid(validate_email(email), validate_login_password(password))
        email = normalize_email(email)

        if await self.tracker.is_locked(email):
            logger.warning(f"Login refused: {LoginFailureReason.ACCOUNT_LOCKED.value}")
            raise AccountLockedException(ResponseMessage.ACCOUNT_LOCKED)

        try:
            user = await self.users.get_by_email(email)
        except RepositoryError:
            logger.warning("User lookup failed during login; answering with invalid credentials")
            user = None

        if user is None:
            await self._burn_verify(password)
            await self.tracker.record_failure(email)
            logger.info(f"Login failed: {LoginFailureReason.UNKNOWN_USER.value}")
            raise InvalidCredentialsException(ResponseMessage.INVALID_CREDENTIALS)

        if not user.is_active:
            logger.info(f"Login refused for user {user.id}: {LoginFailureReason.ACCOUNT_DISABLED.value}")
            raise AccountDisabledException(ResponseMessage.ACCOUNT_DISABLED)

        try:
            matched = await self._verify_password(password, user.password_hash)
        except InvalidHashFormatError:
            logger.error(f"Stored password hash for user {user.id} is not a valid argon2id hash")
            raise

        if not matched:
            attempts = await self.tracker.record_failure(email)
            logger.info(
                f"Login failed for user {user.id}: "
                f"{LoginFailureReason.INVALID_CREDENTIALS.value} (attempt {attempts})"
            )
            raise InvalidCredentialsException(ResponseMessage.INVALID_CREDENTIALS)

        await self.tracker.clear(email)

        try:
            await self.users.update_last_login(user.id)
        except RepositoryError:
            logger.warning(f"Could not update last login for user {user.id}")

        if self.hasher.needs_rehash(user.password_hash):
            await self._upgrade_hash(user, password)

        response = await self._issue_tokens(user)
        logger.info(f"User logged in: {user.id}")
        return response

    async def _upgrade_hash(self, user: UserRecord, password: str) -> None:
        """Re-hash a password minted under older Argon2 parameters."""
        try:
            new_hash = await self._hash_password(password)
            await self.users.update_password(user.id, new_hash)
            logger.info(f"Upgraded password hash parameters for user {user.id}")
        except AuthServiceError as e:
            logger.warning(f"Password hash upgrade failed for user {user.id}: {e.message}")

    async def validate_token(self, access_token: str) -> ValidateTokenResponse:
        """
        Validate an access token and resolve its user.
        Invalid tokens produce valid=false instead of an error.

        Raises:
            ValidationError: If the token is empty or oversized
        """
        ensure_valid(validate_token(access_token, "access_token"))

        try:
            claims = self.issuer.validate(access_token.strip(), TokenType.ACCESS)
        except TokenError:
            return ValidateTokenResponse(valid=False, message=ResponseMessage.TOKEN_INVALID)

        user = await self.users.get_by_id(claims.subject)
        if user is None:
            return ValidateTokenResponse(valid=False, message=ResponseMessage.USER_NOT_FOUND)
        if not user.is_active:
            return ValidateTokenResponse(valid=False, message=ResponseMessage.USER_DISABLED)

        return ValidateTokenResponse(
            valid=True,
            user=UserSummary.model_validate(user),
            message=ResponseMessage.TOKEN_VALID
        )

    async def forgot_password(self, email: str) -> MessageResponse:
        """
        Start a password reset.

        The response is identical whether or not the email is registered.
        A reset record is only created for an existing, active account.
        """
        ensure_valid(validate_email(email))
        email = normalize_email(email)
        response = MessageResponse(success=True, message=ResponseMessage.PASSWORD_RESET_REQUESTED)

        user = await self.users.get_by_email(email)
        if user is None or not user.is_active:
            logger.info("Password reset requested for unknown or inactive account")
            return response

        token = generate_secure_token(InputLimit.RESET_TOKEN_BYTES)
        ttl = self.settings.password_reset_expire_timedelta
        try:
            await self.store.set_password_reset_token(token, user.id, ttl)
        except StoreError:
            # Failing only for registered emails would reveal which ones exist
            logger.error(f"Could not store password reset token for user {user.id}; no reset sent")
            return response

        try:
            await self.notifier.send_password_reset(user, token, ttl)
        except Exception:
            # Delivery errors must not change the response for existing accounts
            logger.exception(f"Password reset notification failed for user {user.id}")

        return response

    async def reset_password(self, token: str, new_password: str) -> MessageResponse:
        """
        Complete a password reset.

        The reset record is consumed before hashing, so a token can be used
        at most once even under concurrent requests. All refresh tokens of
        the user are revoked afterwards.

        Raises:
            ValidationError: If input is invalid or the token is unknown,
                expired or already used
        """
        ensure_valid(validate_token(token, "token"), validate_password(new_password, "new_password"))

        user_id = await self.store.consume_password_reset_token(token.strip())
        if not user_id:
            raise ValidationError(ResponseMessage.RESET_TOKEN_INVALID, field="token")

        password_hash = await self._hash_password(new_password)
        if not await self.users.update_password(user_id, password_hash):
            raise ValidationError(ResponseMessage.RESET_TOKEN_INVALID, field="token")

        try:
            revoked = await self.store.revoke_user_sessions(user_id)
            logger.info(f"Password reset for user {user_id}; revoked {revoked} refresh tokens")
        except StoreError:
            logger.error(f"Password reset for user {user_id} but refresh tokens could not be revoked")

        return MessageResponse(success=True, message=ResponseMessage.PASSWORD_RESET_SUCCESS)

    async def refresh_token(self, refresh_token: str) -> LoginResponse:
        """
        Exchange a refresh token for a new token pair.
        The presented refresh token is revoked (rotation).

        Raises:
            TokenError: If the token is invalid, expired, revoked or its
                user is gone or disabled
        """
        ensure_valid(validate_token(refresh_token, "refresh_token"))
        claims = self.issuer.validate(refresh_token.strip(), TokenType.REFRESH)

        owner = await self.store.get_refresh_token(claims.jti)
        if owner != claims.subject:
            raise InvalidTokenException(ResponseMessage.REFRESH_TOKEN_INVALID)

        user = await self.users.get_by_id(claims.subject)
        if user is None or not user.is_active:
            await self.store.delete_refresh_token(claims.jti, claims.subject)
            raise InvalidTokenException(ResponseMessage.REFRESH_TOKEN_INVALID)

        # Only one concurrent rotation can delete the record
        if not await self.store.delete_refresh_token(claims.jti, user.id):
            raise InvalidTokenException(ResponseMessage.REFRESH_TOKEN_INVALID)

        return await self._issue_tokens(user)

    async def logout(self, refresh_token: str) -> MessageResponse:
        """Revoke a refresh token. Revoking an already revoked token succeeds."""
        ensure_valid(validate_token(refresh_token, "refresh_token"))
        claims = self.issuer.validate(refresh_token.strip(), TokenType.REFRESH)

        await self.store.delete_refresh_token(claims.jti, claims.subject)
        logger.info(f"User logged out: {claims.subject}")

        return MessageResponse(success=True, message=ResponseMessage.LOGOUT_SUCCESS)

    async def check_dependencies(self) -> Dict[str, bool]:
        """Ping the session store and the user repository."""
        status = {}
        try:
            status["redis"] = await self.store.ping()
        except StoreError:
            status["redis"] = False
        try:
            status["database"] = await self.users.ping()
        except RepositoryError:
            status["database"] = False
        return status
