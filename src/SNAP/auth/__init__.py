from .errors import LOGIN_FALLBACK, MESSAGES, REGISTER_FALLBACK, category_for, login_error, register_error
from .identity import FirebaseIdentityProvider, IdentityProvider
from .local_session import LocalSessionStore
from .manager import AuthSessionManager, AuthState, local_user, managed_user
from .tokens import TokenSet

__all__ = [
    "AuthSessionManager",
    "AuthState",
    "FirebaseIdentityProvider",
    "IdentityProvider",
    "LocalSessionStore",
    "TokenSet",
    "LOGIN_FALLBACK",
    "REGISTER_FALLBACK",
    "MESSAGES",
    "category_for",
    "login_error",
    "register_error",
    "local_user",
    "managed_user",
]
