"""Mock auth verifier for local development and tests."""

from devcamper.adapters.auth.base import AuthVerificationError, TokenVerifier, normalize_role
from devcamper.schemas.auth import Principal


class MockTokenVerifier(TokenVerifier):
    """Accepts deterministic test tokens only.

    Expected token format:
    - ``test:<user_id>`` (role defaults to ``user``)
    - ``test:<user_id>:<role>`` where role is ``user``, ``publisher`` or ``admin``
    """

    def verify_token(self, token: str) -> Principal:
        parts = token.split(":")
        if len(parts) not in (2, 3) or parts[0] != "test":
            raise AuthVerificationError("Invalid bearer token")

        user_id = parts[1].strip()
        if not user_id:
            raise AuthVerificationError("Bearer token missing user identity")
        if len(parts) == 3 and not parts[2].strip():
            raise AuthVerificationError("Bearer token missing role")

        role = normalize_role(parts[2] if len(parts) == 3 else None)
        return Principal(id=user_id, role=role)


__all__ = ["MockTokenVerifier"]
