# src/SNAP/auth/errors.py
from __future__ import annotations

from SNAP.exceptions import AuthError, IdentityProviderError

INVALID_CREDENTIAL = "invalid-credential"
INVALID_EMAIL = "invalid-email"
EMAIL_IN_USE = "email-already-in-use"
WEAK_PASSWORD = "weak-password"
UNKNOWN = "unknown"

MESSAGES = {
    INVALID_CREDENTIAL: "Email ou senha incorretos.",
    INVALID_EMAIL: "Email inválido.",
    EMAIL_IN_USE: "Este email já está em uso.",
    WEAK_PASSWORD: "A senha deve ter pelo menos 6 caracteres.",
}
LOGIN_FALLBACK = "Erro ao fazer login. Tente novamente."
REGISTER_FALLBACK = "Erro ao criar conta."

# Identity Toolkit error codes -> categories
_PROVIDER_CODES = {
    "INVALID_LOGIN_CREDENTIALS": INVALID_CREDENTIAL,
    "INVALID_PASSWORD": INVALID_CREDENTIAL,
    "EMAIL_NOT_FOUND": INVALID_CREDENTIAL,
    "INVALID_EMAIL": INVALID_EMAIL,
    "MISSING_EMAIL": INVALID_EMAIL,
    "EMAIL_EXISTS": EMAIL_IN_USE,
    "WEAK_PASSWORD": WEAK_PASSWORD,
}


def category_for(code: str) -> str:
    # WEAK_PASSWORD arrives as "WEAK_PASSWORD : Password should be at least 6 characters"
    head = (code or "").split(":", 1)[0].strip().upper()
    return _PROVIDER_CODES.get(head, UNKNOWN)


def login_error(err: IdentityProviderError) -> AuthError:
    category = category_for(err.code)
    if category in (INVALID_CREDENTIAL, INVALID_EMAIL):
        return AuthError(category, MESSAGES[category], cause=err)
    return AuthError(category, LOGIN_FALLBACK, cause=err)


def register_error(err: IdentityProviderError) -> AuthError:
    category = category_for(err.code)
    if category in (EMAIL_IN_USE, WEAK_PASSWORD):
        return AuthError(category, MESSAGES[category], cause=err)
    return AuthError(category, REGISTER_FALLBACK, cause=err)
