"""
Admin authentication service.

Composes the rate limiter, the admin repository, password verification
and token issuance into the login flow, and turns session tokens back
into admin identities for protected routes.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

from app.core.errors import UnauthorizedError
from app.core.logging_config import get_logger
from app.core.security import (
    create_access_token,
    decode_access_token,
    dummy_password_hash,
    verify_password,
)
from app.repositories.admin import AdminRepository
from app.schemas.auth import AdminIdentity
from app.services.rate_limiter import FixedWindowRateLimiter, RateLimitResult

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"


@dataclass(frozen=True)
class LoginResult:
    """Successful login: token to store in the cookie plus who logged in."""
    token: str
    admin: AdminIdentity
    rate_limit: RateLimitResult


class AuthService:
    """
    Login and session checks for admins.

    Login order is fixed: rate limit first (so a blocked client never
    reaches the credential store), then lookup, then password check,
    then token issuance. Every credential failure produces the same
    UnauthorizedError whether or not the username exists.

    Attributes:
        admins: Repository used to look up accounts
        rate_limiter: Limiter shared by all requests in this process
        login_limit: Attempts allowed per client per window
        login_window_seconds: Window length in seconds
    """

    def __init__(
        self,
        admins: AdminRepository,
        rate_limiter: FixedWindowRateLimiter,
        login_limit: int = 5,
        login_window_seconds: float = 60.0,
    ):
        self.admins = admins
        self.rate_limiter = rate_limiter
        self.login_limit = login_limit
        self.login_window_seconds = login_window_seconds

    async def login(self, username: str, password: str, client_ip: str) -> LoginResult:
        """
        Authenticate an admin and issue a session token.

        Args:
            username: Submitted username
            password: Submitted plain text password
            client_ip: Client address used as the rate limit key

        Returns:
            LoginResult with the signed token and admin identity

        Raises:
            RateLimitExceeded: Too many attempts from this client
            UnauthorizedError: Unknown username or wrong password
        """
        rate_limit = self.rate_limiter.attempt(
            f"login:{client_ip}",
            limit=self.login_limit,
            window_seconds=self.login_window_seconds,
        )

        admin = await self.admins.get_by_username(username)

        if admin is None:
            # Spend the same bcrypt time as a real check
            await self._verify(password, None)
            logger.info("Login failed", extra={"client_ip": client_ip, "reason": "unknown_user"})
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if not await self._verify(password, admin.hashed_password):
            logger.info("Login failed", extra={"client_ip": client_ip, "reason": "bad_password"})
            raise UnauthorizedError(INVALID_CREDENTIALS)

        token = create_access_token(admin_id=admin.id, username=admin.username)
        logger.info(
            "Login succeeded",
            extra={"admin_id": admin.id, "client_ip": client_ip},
        )
        return LoginResult(
            token=token,
            admin=AdminIdentity(id=admin.id, username=admin.username),
            rate_limit=rate_limit,
        )

    @staticmethod
    async def _verify(password: str, hashed_password: Optional[str]) -> bool:
        """
        Run the bcrypt check in the default executor.

        ``None`` checks against the dummy hash, computed in the worker
        on first use.
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            lambda: verify_password(password, hashed_password or dummy_password_hash()),
        )

    @staticmethod
    def authorize(token: Optional[str]) -> Optional[AdminIdentity]:
        """
        Resolve a session token to an admin identity.

        Missing, malformed, forged and expired tokens all return None;
        callers must not distinguish between them.
        """
        token_data = decode_access_token(token)
        if token_data is None:
            return None
        return AdminIdentity(id=token_data.admin_id, username=token_data.username)
