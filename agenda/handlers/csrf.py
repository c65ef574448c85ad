"""Per-session anti-forgery token.

The token lives in the caller's session and is passed around explicitly as
a ``CsrfContext``. A session without a token never accepts the client's
value as a bootstrap.
"""

import secrets

from django.contrib.sessions.backends.base import SessionBase
from django.utils.crypto import constant_time_compare

from agenda.domain.errors import CsrfError

SESSION_KEY = "agenda_csrf"


class CsrfContext:
    """Generates, checks and rotates the token stored in a session."""

    def __init__(self, session: SessionBase) -> None:
        self._session = session

    @classmethod
    def from_request(cls, request) -> "CsrfContext":
        return cls(request.session)

    def token(self) -> str:
        """Return the session token, creating it on first use."""
        token = self._session.get(SESSION_KEY)
        if not token:
            token = secrets.token_hex(32)
            self._session[SESSION_KEY] = token
        return token

    def verify(self, submitted: str | None) -> None:
        """Raise CsrfError unless ``submitted`` matches the session token."""
        expected = self._session.get(SESSION_KEY)
        if not submitted or not expected:
            raise CsrfError(missing=True)
        if not constant_time_compare(expected, submitted):
            raise CsrfError()

    def rotate(self) -> str:
        self._session[SESSION_KEY] = secrets.token_hex(32)
        return self._session[SESSION_KEY]
