# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

"""Provides authentication classes for use with the msrest library
"""

import logging
from msrest.authentication import Authentication
from .connection_string import ConnectionString
from .connection_string import HOST_NAME, SHARED_ACCESS_KEY_NAME, SHARED_ACCESS_KEY
from .sastoken import SasTokenProvider, DEFAULT_TOKEN_TTL

__all__ = ["ConnectionStringAuthentication"]

logger = logging.getLogger(__name__)


class ConnectionStringAuthentication(ConnectionString, Authentication):
    """ConnectionString class that can be used with msrest to provide SasToken authentication

    msrest signs the session before every request. The same token is reused
    until it nears expiry.

    :param connection_string: The service connection string to generate SasTokens with
    :param int token_ttl: Lifetime of each SasToken, in seconds
    """

    def __init__(self, connection_string, token_ttl=DEFAULT_TOKEN_TTL):
        super(ConnectionStringAuthentication, self).__init__(
            connection_string
        )  # ConnectionString __init__
        self._token_provider = SasTokenProvider(
            self[HOST_NAME], self[SHARED_ACCESS_KEY], self[SHARED_ACCESS_KEY_NAME], token_ttl
        )

    def signed_session(self, session=None):
        """Create requests session with any required auth headers applied.

        :param session: The session to configure for authentication
        :type session: requests.Session
        :rtype: requests.Session
        """
        session = super(ConnectionStringAuthentication, self).signed_session(session)
        logger.debug("Authorizing request to {}".format(self[HOST_NAME]))
        session.headers[self.header] = self._token_provider.get_token()
        return session
