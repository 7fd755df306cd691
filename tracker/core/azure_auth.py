"""
Azure AD (Microsoft Entra ID) access token validation.

Tokens are verified against the tenant's JWKS endpoint using RS256. Signing
keys are fetched lazily and cached by ``PyJWKClient``.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import jwt
from fastapi.concurrency import run_in_threadpool

from tracker.core.config import settings
from tracker.core.exceptions import AuthenticationError

logger = logging.getLogger("tracker.auth.azure")

AZURE_ISSUER_HOSTS = ("login.microsoftonline.com", "sts.windows.net")
MULTI_TENANT_AUTHORITIES = ("common", "organizations", "consumers")


@dataclass
class AzureIdentity:
    """Identity claims extracted from a verified Azure AD token."""
    id: str
    name: str
    email: Optional[str]
    tenant_id: Optional[str] = None
    given_name: Optional[str] = None
    family_name: Optional[str] = None


def is_azure_token(token: str) -> bool:
    """Check, without verifying, whether a token was issued by Azure AD."""
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return False
    issuer = claims.get("iss") or ""
    return any(host in issuer for host in AZURE_ISSUER_HOSTS)


class AzureTokenValidator:
    """Validate Azure AD tokens for a single tenant."""

    def __init__(
        self,
        tenant_id: str = settings.AZURE_TENANT_ID,
        client_id: str = settings.AZURE_CLIENT_ID,
        cache_seconds: int = settings.AZURE_JWKS_CACHE_SECONDS,
    ):
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.jwks_client = jwt.PyJWKClient(
            f"https://login.microsoftonline.com/{tenant_id}/discovery/v2.0/keys",
            cache_keys=True,
            max_cached_keys=5,
            lifespan=cache_seconds,
        )

    @property
    def issuers(self) -> List[str]:
        return [
            f"https://login.microsoftonline.com/{self.tenant_id}/v2.0",
            f"https://sts.windows.net/{self.tenant_id}/",
        ]

    async def validate(self, token: str) -> AzureIdentity:
        """
        Verify an Azure AD token and extract the caller's identity.

        Args:
            token: Raw bearer token

        Returns:
            AzureIdentity: Identity claims from the verified token

        Raises:
            AuthenticationError: If the token cannot be verified
        """
        try:
            # Key lookup may hit the network
            signing_key = await run_in_threadpool(self.jwks_client.get_signing_key_from_jwt, token)
            claims = self._decode(token, signing_key.key)
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except jwt.PyJWTError as e:
            logger.warning(f"Azure token verification failed: {e}")
            raise AuthenticationError("Token verification failed")

        subject = claims.get("oid") or claims.get("sub")
        if not subject:
            logger.warning("Azure token has neither oid nor sub claim")
            raise AuthenticationError("Token has no subject")

        return AzureIdentity(
            id=subject,
            name=claims.get("name") or "Unknown",
            email=claims.get("preferred_username") or claims.get("email") or claims.get("upn"),
            tenant_id=claims.get("tid"),
            given_name=claims.get("given_name"),
            family_name=claims.get("family_name"),
        )

    @property
    def multi_tenant(self) -> bool:
        return self.tenant_id in MULTI_TENANT_AUTHORITIES

    def _decode(self, token: str, key: Any) -> Dict[str, Any]:
        # Multi-tenant authorities issue tokens under the caller's own tenant ID
        options = {"verify_aud": bool(self.client_id), "verify_iss": not self.multi_tenant}
        return jwt.decode(
            token,
            key,
            algorithms=["RS256"],
            issuer=None if self.multi_tenant else self.issuers,
            audience=self.client_id or None,
            options=options,
        )


_validator: Optional[AzureTokenValidator] = None


def get_azure_validator() -> AzureTokenValidator:
    """Get the shared validator, creating it on first use."""
    global _validator
    if _validator is None:
        _validator = AzureTokenValidator()
    return _validator
