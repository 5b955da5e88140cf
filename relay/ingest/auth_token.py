"""Signed bearer tokens for the QWeather API (EdDSA / Ed25519 JWT)."""

import logging
from collections.abc import Callable
from pathlib import Path

import jwt

from relay.config.schema import AuthConfig
from relay.models.common import unix_now

logger = logging.getLogger(__name__)

ALGORITHM = "EdDSA"


class TokenError(Exception):
    """Raised when a token cannot be generated from the auth config."""


def generate_token(auth: AuthConfig, now: Callable[[], float] = unix_now) -> str:
    """Sign a token with header ``{alg, kid}`` and payload ``{sub, iat, exp}``.

    ``iat`` is backdated to tolerate clock skew on the provider side.
    """
    missing = [
        name for name in ("kid", "sub", "private_key_path") if not getattr(auth, name)
    ]
    if missing:
        raise TokenError(f"Auth config missing: {', '.join(missing)}")

    try:
        private_key = Path(auth.private_key_path).read_text(encoding="utf-8")
    except OSError as e:
        raise TokenError(f"Cannot read private key {auth.private_key_path}: {e}") from e

    iat = int(now()) - auth.backdate_seconds
    payload = {
        "sub": auth.sub,
        "iat": iat,
        "exp": iat + auth.ttl_hours * 60 * 60,
    }
    try:
        # typ=None drops PyJWT's default "typ" header
        return jwt.encode(
            payload, private_key, algorithm=ALGORITHM, headers={"kid": auth.kid, "typ": None}
        )
    except (ValueError, TypeError, jwt.PyJWTError) as e:
        logger.error("Token signing failed for kid=%s: %s", auth.kid, e)
        raise TokenError(f"Token signing failed: {e}") from e


def token_provider(auth: AuthConfig) -> Callable[[], str]:
    """Bind an auth config into a zero-arg callable producing fresh tokens."""
    return lambda: generate_token(auth)
