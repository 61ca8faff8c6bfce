from __future__ import annotations
from datetime import datetime, timezone, timedelta
from pydantic import BaseModel

def _now():
    return datetime.now(timezone.utc)

class TokenSet(BaseModel):
    """Managed-provider session: who signed in and the tokens that prove it."""
    uid: str
    email: str | None = None
    id_token: str
    refresh_token: str | None = None
    # server-side computed expiry in UTC
    expires_at: datetime

    @classmethod
    def from_sign_in_response(cls, data: dict) -> "TokenSet":
        # Identity Toolkit fields: localId, email, idToken, refreshToken, expiresIn (string seconds)
        return cls(
            uid=data["localId"],
            email=data.get("email"),
            id_token=data["idToken"],
            refresh_token=data.get("refreshToken"),
            expires_at=_now() + timedelta(seconds=int(data.get("expiresIn", 3600))),
        )

    def refreshed(self, data: dict) -> "TokenSet":
        # Secure Token fields: id_token, refresh_token, expires_in, user_id
        return self.model_copy(update={
            "id_token": data["id_token"],
            "refresh_token": data.get("refresh_token", self.refresh_token),
            "expires_at": _now() + timedelta(seconds=int(data.get("expires_in", 3600))),
        })

    def expires_within(self, seconds: int) -> bool:
        return self.expires_at - _now() <= timedelta(seconds=seconds)
