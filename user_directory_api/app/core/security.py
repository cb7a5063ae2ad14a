"""
Security helpers for password hashing and HTTP Basic authentication.

Passwords are hashed with bcrypt through passlib's ``CryptContext``.
The work factor comes from ``settings.password_hash_rounds`` (12 by
default).  Only the resulting digest is ever stored.

The users API is guarded by HTTP Basic authentication.  The accepted
credentials are read from the settings attached to the running
application (``request.app.state.settings``) so that tests and
alternative deployments can supply their own.
"""

import logging
import secrets

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from passlib.context import CryptContext


logger = logging.getLogger(__name__)


class PasswordHasher:
    """One‑way, salted password hashing backed by bcrypt.

    Parameters
    ----------
    rounds : int
        bcrypt cost factor (log2 of the number of iterations).  Valid
        values range from 4 to 31.
    """

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, plain_password: str) -> str:
        """Return a salted bcrypt digest of ``plain_password``."""
        return self._context.hash(plain_password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """Check ``plain_password`` against a stored digest."""
        return self._context.verify(plain_password, hashed_password)


security = HTTPBasic(auto_error=False)


def get_current_username(
    request: Request,
    credentials: HTTPBasicCredentials = Depends(security),
) -> str:
    """Dependency that enforces HTTP Basic authentication.

    Compares the supplied username and password with the configured
    ones in constant time.  Raises HTTP 401 with a ``WWW-Authenticate``
    challenge when credentials are missing or wrong, otherwise
    returns the authenticated username.
    """
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Basic"},
    )
    if credentials is None:
        raise unauthorized

    app_settings = request.app.state.settings
    username_ok = secrets.compare_digest(
        credentials.username.encode("utf-8"),
        app_settings.basic_auth_username.encode("utf-8"),
    )
    password_ok = secrets.compare_digest(
        credentials.password.encode("utf-8"),
        app_settings.basic_auth_password.encode("utf-8"),
    )
    if not (username_ok and password_ok):
        logger.warning("Rejected basic auth attempt for %r", credentials.username)
        raise unauthorized
    return credentials.username
