"""Firebase Auth token verifier adapter."""

from __future__ import annotations

from typing import Any

from devcamper.adapters.auth.base import AuthVerificationError, TokenVerifier, normalize_role
from devcamper.schemas.auth import Principal


def _firebase_auth_module() -> Any:
    try:
        import firebase_admin
        from firebase_admin import auth as firebase_auth
    except ImportError as exc:  # pragma: no cover - depends on optional package
        raise AuthVerificationError("Firebase auth verifier is unavailable") from exc

    if not firebase_admin._apps:
        firebase_admin.initialize_app()
    return firebase_auth


class FirebaseTokenVerifier(TokenVerifier):
    """Verifies Firebase ID tokens.

    The directory role is read from a custom claim (``role`` by default); tokens
    without the claim resolve to a plain ``user``.
    """

    def __init__(self, project_id: str | None, audience: str | None, *, role_claim: str = "role") -> None:
        self._project_id = project_id
        self._audience = audience
        self._role_claim = role_claim

    def verify_token(self, token: str) -> Principal:
        firebase_auth = _firebase_auth_module()
        try:
            claims = firebase_auth.verify_id_token(token, check_revoked=True)
        except Exception as exc:  # pragma: no cover - provider exception surface
            raise AuthVerificationError("Invalid bearer token") from exc

        self._check_audience_and_issuer(claims)

        subject = str(claims.get("uid") or claims.get("sub") or "").strip()
        if not subject:
            raise AuthVerificationError("Bearer token missing user identity")
        return Principal(id=subject, role=normalize_role(claims.get(self._role_claim)))

    def _check_audience_and_issuer(self, claims: dict[str, Any]) -> None:
        audience = str(claims.get("aud", ""))
        if self._audience and audience != self._audience:
            raise AuthVerificationError("Invalid bearer token audience")
        if not self._project_id:
            return
        if self._project_id not in str(claims.get("iss", "")) and audience != self._project_id:
            raise AuthVerificationError("Invalid bearer token issuer")


__all__ = ["FirebaseTokenVerifier"]
