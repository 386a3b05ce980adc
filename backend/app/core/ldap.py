"""
LDAP directory authentication.

Binds with the service account, searches for the user entry and then binds
as that entry with the supplied password. ldap3 is blocking, so the work runs
in a worker thread.
"""
import asyncio
from typing import Optional

from ldap3 import AUTO_BIND_NONE, Connection, Server, SUBTREE
from ldap3.core.exceptions import LDAPException
from ldap3.utils.conv import escape_filter_chars

from app.config import Settings, get_settings


class LDAPUserNotFoundError(LDAPException):
    """No directory entry matched the search filter."""


class LDAPEmptyPasswordError(LDAPException):
    """Empty passwords would turn into an unauthenticated bind."""


class LDAPAuthenticator:
    """Verify credentials against an LDAP directory."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    @property
    def url(self) -> str:
        return self.settings.ldap_url

    def _server(self) -> Server:
        return Server(self.settings.ldap_url, connect_timeout=self.settings.ldap_timeout_seconds)

    def _search_filter(self, username: str) -> str:
        return self.settings.ldap_search_filter.replace(
            "{{username}}", escape_filter_chars(username)
        )

    def _find_user_dn(self, server: Server, username: str) -> str:
        conn = Connection(
            server,
            user=self.settings.ldap_bind_dn,
            password=self.settings.ldap_bind_credentials,
            auto_bind=AUTO_BIND_NONE,
            receive_timeout=self.settings.ldap_timeout_seconds,
            raise_exceptions=True,
        )
        try:
            conn.bind()
            conn.search(
                self.settings.ldap_search_base,
                self._search_filter(username),
                search_scope=SUBTREE,
                attributes=["cn", "mail"],
            )
            if not conn.entries:
                raise LDAPUserNotFoundError(f"No directory entry for {username}")
            return conn.entries[0].entry_dn
        finally:
            conn.unbind()

    def authenticate_sync(self, username: str, password: str) -> str:
        """
        Bind as the user and return their DN.

        Raises:
            LDAPEmptyPasswordError: If password is empty
            LDAPUserNotFoundError: If the search finds no entry
            LDAPException: Any ldap3 failure (connection, bind, search)
        """
        if not password:
            raise LDAPEmptyPasswordError("Empty password")

        server = self._server()
        user_dn = self._find_user_dn(server, username)

        conn = Connection(
            server,
            user=user_dn,
            password=password,
            auto_bind=AUTO_BIND_NONE,
            receive_timeout=self.settings.ldap_timeout_seconds,
            raise_exceptions=True,
        )
        try:
            conn.bind()
        finally:
            conn.unbind()
        return user_dn

    async def authenticate(self, username: str, password: str) -> str:
        return await asyncio.to_thread(self.authenticate_sync, username, password)
