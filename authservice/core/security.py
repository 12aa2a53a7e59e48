"""
Central security module for the auth service.
Handles Argon2id password hashing, RS256 JWT minting/validation and RSA key
material.
"""

import logging
import os
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError
from passlib.context import CryptContext

from authservice.core.config import Settings
from authservice.core.constants import TokenType
from authservice.core.exceptions import (
    ExpiredTokenException,
    InternalError,
    InvalidHashFormatError,
    InvalidTokenException,
)


logger = logging.getLogger("authservice.security")

ARGON2_IDENT = "$argon2id$"
JWT_ALGORITHM = "RS256"
RSA_KEY_SIZE = 2048


class PasswordHasher:
    """
    Argon2id password hasher.

    Hashes are PHC strings (``$argon2id$v=19$m=..,t=..,p=..$salt$digest``).
    Verification reads every cost parameter and the salt from the stored
    string, so hashes minted under older settings keep verifying after the
    configuration changes.
    """

    def __init__(
        self,
        memory_cost: int = 65536,
        time_cost: int = 3,
        parallelism: int = 2,
        salt_length: int = 16,
        hash_length: int = 32
    ):
        """
        Initialize hasher.

        Args:
            memory_cost: Memory usage in KiB
            time_cost: Number of iterations
            parallelism: Number of lanes
            salt_length: Random salt length in bytes
            hash_length: Digest length in bytes
        """
        self.memory_cost = memory_cost
        self.time_cost = time_cost
        self.parallelism = parallelism
        self.salt_length = salt_length
        self.hash_length = hash_length
        self._context = CryptContext(
            schemes=["argon2"],
            deprecated="auto",
            argon2__type="ID",
            argon2__memory_cost=memory_cost,
            argon2__rounds=time_cost,
            argon2__parallelism=parallelism,
            argon2__salt_len=salt_length,
            argon2__hash_len=hash_length
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "PasswordHasher":
        return cls(
            memory_cost=settings.ARGON2_MEMORY_COST,
            time_cost=settings.ARGON2_TIME_COST,
            parallelism=settings.ARGON2_PARALLELISM,
            salt_length=settings.ARGON2_SALT_LENGTH,
            hash_length=settings.ARGON2_HASH_LENGTH
        )

    def hash(self, password: str) -> str:
        """
        Hash password with a fresh random salt.

        Args:
            password: Plain text password

        Returns:
            Encoded Argon2id hash

        Raises:
            InternalError: If the hash computation fails
        """
        try:
            return self._context.hash(password)
        except (ValueError, MemoryError) as e:
            logger.error(f"Argon2 hashing failed: {e}")
            raise InternalError("failed to hash password") from e

    def verify(self, password: str, encoded: str) -> bool:
        """
        Verify password against an encoded hash in constant time.

        Args:
            password: Plain text password
            encoded: Stored Argon2id hash

        Returns:
            True if password matches, False otherwise

        Raises:
            InvalidHashFormatError: If the encoded hash is malformed
            InternalError: If the hash computation fails
        """
        if not encoded or not encoded.startswith(ARGON2_IDENT):
            raise InvalidHashFormatError()

        try:
            return self._context.verify(password, encoded)
        except ValueError as e:
            raise InvalidHashFormatError() from e
        except MemoryError as e:
            logger.error("Argon2 verification ran out of memory")
            raise InternalError("failed to verify password") from e

    def needs_rehash(self, encoded: str) -> bool:
        """True when the hash was produced with different cost parameters."""
        try:
            return self._context.needs_update(encoded)
        except ValueError:
            return False


@dataclass(frozen=True)
class Claims:
    """Validated token claims."""
    subject: str
    issuer: str
    issued_at: datetime
    not_before: datetime
    expires_at: datetime
    jti: str
    token_type: TokenType
    email: Optional[str] = None


def generate_private_key(key_size: int = RSA_KEY_SIZE) -> rsa.RSAPrivateKey:
    """Generate a fresh RSA private key."""
    return rsa.generate_private_key(public_exponent=65537, key_size=key_size)


def load_private_key(path: Union[str, Path]) -> rsa.RSAPrivateKey:
    """
    Load an RSA private key from a PEM file (PKCS#1 or PKCS#8).

    Raises:
        ValueError: If the file does not hold an unencrypted RSA private key
    """
    data = Path(path).read_bytes()
    key = serialization.load_pem_private_key(data, password=None)
    if not isinstance(key, rsa.RSAPrivateKey):
        raise ValueError(f"{path} is not an RSA private key")
    return key


def load_public_key(path: Union[str, Path]) -> rsa.RSAPublicKey:
    """
    Load an RSA public key from a PEM file.

    Raises:
        ValueError: If the file does not hold an RSA public key
    """
    data = Path(path).read_bytes()
    key = serialization.load_pem_public_key(data)
    if not isinstance(key, rsa.RSAPublicKey):
        raise ValueError(f"{path} is not an RSA public key")
    return key


def write_key_pair(
    private_key_path: Union[str, Path],
    public_key_path: Union[str, Path],
    key_size: int = RSA_KEY_SIZE
) -> rsa.RSAPrivateKey:
    """
    Generate an RSA keypair and write it as PEM files.
    The private key file is created with mode 0600.

    Returns:
        The generated private key
    """
    private_key = generate_private_key(key_size)

    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption()
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    )

    fd = os.open(str(private_key_path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as f:
        f.write(private_pem)
    Path(public_key_path).write_bytes(public_pem)

    return private_key


def generate_secure_token(length: int = 32) -> str:
    """
    Generate a URL-safe random token.

    Args:
        length: Number of random bytes

    Returns:
        Secure random token
    """
    return secrets.token_urlsafe(length)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenIssuer:
    """
    RS256 JWT issuer and validator.

    Only RS256 is ever accepted on validation; tokens whose header names any
    other algorithm (including HMAC ones) are rejected before the signature
    is checked.
    """

    def __init__(
        self,
        issuer: str,
        access_token_ttl: timedelta,
        refresh_token_ttl: timedelta,
        private_key: Optional[rsa.RSAPrivateKey] = None,
        public_key: Optional[rsa.RSAPublicKey] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize token issuer.

        Args:
            issuer: Value of the `iss` claim
            access_token_ttl: Access token lifetime
            refresh_token_ttl: Refresh token lifetime
            private_key: Signing key; an ephemeral key is generated when absent
            public_key: Verification key; derived from private_key when absent
            clock: Time source used when minting tokens
        """
        if access_token_ttl >= refresh_token_ttl:
            raise ValueError("access token lifetime must be shorter than refresh token lifetime")

        if private_key is None:
            if public_key is not None:
                raise ValueError("public_key given without private_key")
            logger.warning(
                "No signing keys configured; generated an ephemeral RSA keypair. "
                "Every token is invalidated when the process restarts."
            )
            private_key = generate_private_key()

        if public_key is None:
            public_key = private_key.public_key()
        elif public_key.public_numbers() != private_key.public_key().public_numbers():
            raise ValueError("public key does not match private key")

        self.issuer = issuer
        self.access_token_ttl = access_token_ttl
        self.refresh_token_ttl = refresh_token_ttl
        self._clock = clock or _utcnow
        self._private_pem = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption()
        ).decode()
        self._public_pem = public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo
        ).decode()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        clock: Optional[Callable[[], datetime]] = None
    ) -> "TokenIssuer":
        """Build an issuer, loading keys from disk when paths are configured."""
        private_key = None
        public_key = None
        if settings.JWT_PRIVATE_KEY_PATH and settings.JWT_PUBLIC_KEY_PATH:
            private_key = load_private_key(settings.JWT_PRIVATE_KEY_PATH)
            public_key = load_public_key(settings.JWT_PUBLIC_KEY_PATH)
            logger.info(f"Loaded RS256 signing keys from {settings.JWT_PRIVATE_KEY_PATH}")

        return cls(
            issuer=settings.JWT_ISSUER,
            access_token_ttl=settings.access_token_expire_timedelta,
            refresh_token_ttl=settings.refresh_token_expire_timedelta,
            private_key=private_key,
            public_key=public_key,
            clock=clock
        )

    @property
    def public_key_pem(self) -> str:
        return self._public_pem

    def _encode(
        self,
        subject: str,
        token_type: TokenType,
        ttl: timedelta,
        additional_claims: Optional[Dict[str, Any]] = None
    ) -> str:
        now = self._clock()
        issued_at = int(now.timestamp())
        to_encode = {
            "sub": subject,
            "iss": self.issuer,
            "iat": issued_at,
            "nbf": issued_at,
            "exp": int((now + ttl).timestamp()),
            "jti": str(uuid.uuid4()),
            "type": token_type.value
        }
        if additional_claims:
            to_encode.update(additional_claims)

        try:
            return jwt.encode(to_encode, self._private_pem, algorithm=JWT_ALGORITHM)
        except JWTError as e:
            logger.error(f"Failed to sign {token_type.value} token: {e}")
            raise InternalError(f"failed to create {token_type.value} token") from e

    def create_access_token(self, user_id: str, email: str) -> str:
        """
        Create a short-lived access token.

        Args:
            user_id: Subject of the token
            email: User email carried in the `email` claim

        Returns:
            Encoded JWT
        """
        return self._encode(
            subject=user_id,
            token_type=TokenType.ACCESS,
            ttl=self.access_token_ttl,
            additional_claims={"email": email}
        )

    def create_refresh_token(self, user_id: str) -> str:
        """Create a long-lived refresh token."""
        return self._encode(
            subject=user_id,
            token_type=TokenType.REFRESH,
            ttl=self.refresh_token_ttl
        )

    def validate(self, token: str, expected_type: TokenType = TokenType.ACCESS) -> Claims:
        """
        Validate a token and return its claims.

        Args:
            token: Encoded JWT
            expected_type: Required value of the `type` claim

        Returns:
            Validated claims

        Raises:
            ExpiredTokenException: If the token has expired
            InvalidTokenException: On any other defect
        """
        try:
            header = jwt.get_unverified_header(token)
        except JWTError:
            raise InvalidTokenException()

        if header.get("alg") != JWT_ALGORITHM:
            logger.warning(f"Rejected token signed with unexpected algorithm {header.get('alg')!r}")
            raise InvalidTokenException()

        try:
            payload = jwt.decode(
                token,
                self._public_pem,
                algorithms=[JWT_ALGORITHM],
                issuer=self.issuer,
                options={
                    "require_exp": True,
                    "require_iat": True,
                    "require_nbf": True,
                    "require_sub": True,
                    "require_jti": True
                }
            )
        except ExpiredSignatureError:
            raise ExpiredTokenException()
        except JWTClaimsError:
            raise InvalidTokenException("Invalid token claims")
        except JWTError:
            raise InvalidTokenException()

        if payload.get("type") != expected_type.value:
            raise InvalidTokenException(f"Invalid token type. Expected {expected_type.value}")

        return Claims(
            subject=payload["sub"],
            issuer=payload["iss"],
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            not_before=datetime.fromtimestamp(payload["nbf"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            jti=payload["jti"],
            token_type=expected_type,
            email=payload.get("email")
        )

    def get_token_id(self, token: str) -> str:
        """Return the jti of a valid refresh token."""
        return self.validate(token, expected_type=TokenType.REFRESH).jti
