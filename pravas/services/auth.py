"""
Identity lookup for bearer tokens.

Sign-in itself (magic links, OAuth) belongs to an external identity
provider; the API only needs to turn the token it was handed into an
``Identity``.  ``StaticTokenIdentityProvider`` covers single-user and
test deployments from configuration.
"""

from abc import ABC, abstractmethod

from pravas.core.models import Identity


class BaseIdentityProvider(ABC):
    """Resolves an access token to the user it was issued for."""

    @abstractmethod
    async def resolve(self, token: str) -> Identity | None:
        """Return the identity for *token*, or None if it is not valid."""


class StaticTokenIdentityProvider(BaseIdentityProvider):
    """Token table loaded from ``Settings.auth_tokens``.

    Values are ``"user_id"`` or ``"user_id:email"``.
    """

    def __init__(self, tokens: dict[str, str]) -> None:
        self._identities: dict[str, Identity] = {}
        for token, value in tokens.items():
            user_id, _, email = value.partition(":")
            self._identities[token] = Identity(user_id=user_id, email=email)

    async def resolve(self, token: str) -> Identity | None:
        return self._identities.get(token)
