"""Authentication provider interfaces."""

from abc import ABC, abstractmethod

from devcamper.schemas.auth import Principal, Role


class AuthVerificationError(Exception):
    """Raised when a token cannot be verified or normalized."""


class TokenVerifier(ABC):
    """Provider-neutral token verification interface."""

    @abstractmethod
    def verify_token(self, token: str) -> Principal:
        """Verify token and return normalized principal."""


def normalize_role(raw_role: str | None) -> Role:
    """Map a provider role claim onto the closed role set."""
    text = (raw_role or Role.USER.value).strip().lower()
    try:
        return Role(text)
    except ValueError as exc:
        raise AuthVerificationError(f"Unsupported role '{text}'") from exc


__all__ = ["AuthVerificationError", "TokenVerifier", "normalize_role"]
