"""GitHub App authentication.

Handles JWT generation for GitHub App auth and installation token exchange.

GitHub App auth flow:
1. Generate a JWT signed with the App's private key
2. Exchange the JWT for a short-lived installation access token limited to
   the requested repositories and permissions
3. Use the installation token for API calls scoped to that installation
"""

import logging
import threading
import time
from collections.abc import Callable
from typing import Protocol

import httpx
import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from ..errors import AccessTokenError
from .models import TokenScope

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
GITHUB_JSON_MEDIA_TYPE = "application/vnd.github+json"

# GitHub rejects app JWTs valid for longer than 10 minutes.
JWT_LIFETIME_SECONDS = 9 * 60
JWT_CLOCK_SKEW_SECONDS = 60
DEFAULT_JWT_CACHE_TTL = 60.0


class AccessTokenProvider(Protocol):
    """Anything that can mint an installation token for a scope."""

    def access_token(self, scope: TokenScope) -> str: ...


def read_private_key(private_key_pem: str) -> RSAPrivateKey:
    """Decode a PEM encoded RSA private key.

    Raises:
        ValueError: If the PEM cannot be decoded or is not an RSA key
    """
    try:
        key = serialization.load_pem_private_key(
            private_key_pem.encode("utf-8"), password=None
        )
    except (ValueError, TypeError) as e:
        raise ValueError(f"failed to decode PEM formatted key: {e}") from e

    if not isinstance(key, RSAPrivateKey):
        raise ValueError(
            f"failed to convert to RSA private key (got {type(key).__name__})"
        )
    return key


class GitHubApp:
    """GitHub App identity able to exchange its JWT for installation tokens.

    A single instance may be shared between concurrent validations: the only
    mutable state is the cached app JWT, which is guarded by a lock.
    Installation tokens are never cached.
    """

    def __init__(
        self,
        app_id: str,
        installation_id: str,
        private_key: RSAPrivateKey,
        api_base_url: str = DEFAULT_API_BASE_URL,
        access_token_url_pattern: str | None = None,
        jwt_cache_ttl: float = DEFAULT_JWT_CACHE_TTL,
        timeout: float = 10.0,
        http_client: httpx.Client | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the GitHub App identity.

        Args:
            app_id: ID of the GitHub App
            installation_id: ID of the App installation tokens are minted for
            private_key: RSA key registered for the App
            api_base_url: GitHub API root, for GitHub Enterprise deployments
            access_token_url_pattern: Token endpoint with one ``{}`` placeholder
                for the installation ID. Derived from api_base_url if None.
            jwt_cache_ttl: Seconds a signed app JWT is reused. 0 disables caching.
            timeout: Per-request timeout in seconds
            http_client: Optional shared httpx client
            clock: Time source, injectable for tests
        """
        self.app_id = app_id
        self.installation_id = installation_id
        self._private_key = private_key
        self.api_base_url = api_base_url.rstrip("/")
        self.access_token_url_pattern = (
            access_token_url_pattern
            or f"{self.api_base_url}/app/installations/{{}}/access_tokens"
        )
        self.jwt_cache_ttl = jwt_cache_ttl
        self.timeout = timeout
        self._http_client = http_client
        self._clock = clock

        self._jwt_lock = threading.Lock()
        self._cached_jwt: str | None = None
        self._cached_jwt_expiry = 0.0

    @property
    def access_token_url(self) -> str:
        return self.access_token_url_pattern.format(self.installation_id)

    def _sign_jwt(self, now: int) -> str:
        payload = {
            "iat": now - JWT_CLOCK_SKEW_SECONDS,
            "exp": now + JWT_LIFETIME_SECONDS,
            "iss": self.app_id,
        }
        return jwt.encode(payload, self._private_key, algorithm="RS256")

    def app_jwt(self) -> str:
        """Return a signed app JWT, reusing a cached one while it is fresh."""
        now = self._clock()
        with self._jwt_lock:
            if self._cached_jwt is not None and now < self._cached_jwt_expiry:
                return self._cached_jwt

            try:
                token = self._sign_jwt(int(now))
            except (jwt.PyJWTError, ValueError, TypeError) as e:
                raise AccessTokenError(f"failed to sign app JWT: {e}") from e

            if self.jwt_cache_ttl > 0:
                self._cached_jwt = token
                self._cached_jwt_expiry = now + self.jwt_cache_ttl
            return token

    def access_token(self, scope: TokenScope) -> str:
        """Exchange the app JWT for an installation token limited to scope.

        Raises:
            AccessTokenError: On signing failure, transport failure, a
                non-201 response or a response without a token
        """
        headers = {
            "Accept": GITHUB_JSON_MEDIA_TYPE,
            "Authorization": f"Bearer {self.app_jwt()}",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
        logger.debug(
            f"Requesting installation token for repositories {list(scope.repositories)} "
            f"with permissions {scope.permissions}"
        )

        try:
            if self._http_client is not None:
                response = self._http_client.post(
                    self.access_token_url,
                    json=scope.to_request_body(),
                    headers=headers,
                    timeout=self.timeout,
                )
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(
                        self.access_token_url,
                        json=scope.to_request_body(),
                        headers=headers,
                    )
        except httpx.HTTPError as e:
            raise AccessTokenError(f"token exchange request failed: {e}") from e

        if response.status_code != httpx.codes.CREATED:
            raise AccessTokenError(
                f"unexpected status code {response.status_code} from token exchange"
            )

        try:
            token = response.json()["token"]
        except (ValueError, KeyError, TypeError) as e:
            raise AccessTokenError("malformed token exchange response") from e
        if not isinstance(token, str) or not token:
            raise AccessTokenError("malformed token exchange response")
        return token
