# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module signs the Shared Access Signature (SAS) tokens that authorize
registry requests with an IoTHub shared access policy"""

import base64
import binascii
import hashlib
import hmac
import logging
import time
import urllib.parse

logger = logging.getLogger(__name__)

SERVICE_TOKEN_FORMAT = (
    "SharedAccessSignature sr={resource}&sig={signature}&se={expiry}&skn={policy}"
)
DEFAULT_TOKEN_TTL = 3600
DEFAULT_RENEWAL_MARGIN = 300


class SasTokenError(Exception):
    """Error in SasToken"""

    def __init__(self, message, cause=None):
        """Initializer for SasTokenError

        :param str message: Error message
        :param cause: Exception that caused this error (optional)
        """
        super(SasTokenError, self).__init__(message)
        self.cause = cause


def decode_key(key):
    """Decode a base64 shared access key.

    :raises: SasTokenError if the key is missing or not valid base64
    :rtype: bytes
    """
    try:
        return base64.b64decode(key, validate=True)
    except (TypeError, binascii.Error) as e:
        raise SasTokenError("Shared access key is not valid base64", e)


def sign(signing_key, resource, expiry):
    """Return the url encoded HMAC-SHA256 signature of '<resource>\\n<expiry>'

    :param bytes signing_key: Decoded shared access key
    :param str resource: Url encoded resource URI
    :param int expiry: Expiry time, in seconds since epoch
    """
    message = "{}\n{}".format(resource, expiry).encode("utf-8")
    digest = hmac.new(signing_key, message, hashlib.sha256).digest()
    return urllib.parse.quote(base64.b64encode(digest))


class SasTokenProvider(object):
    """Hands out a service SAS token for one IoTHub, signing a new one once
    the current token is within the renewal margin of its expiry.

    Data Attributes:
    ttl (int): Lifetime of each signed token, in seconds
    expiry_time (int): Expiry of the current token (in UTC, since epoch)
    """

    def __init__(
        self,
        host_name,
        key,
        policy_name,
        ttl=DEFAULT_TOKEN_TTL,
        renewal_margin=DEFAULT_RENEWAL_MARGIN,
    ):
        """Initializer for SasTokenProvider. The first token is signed immediately.

        :param str host_name: IoTHub host name the tokens grant access to
        :param str key: Base64 shared access key of the policy
        :param str policy_name: Name of the shared access policy (SharedAccessKeyName)
        :param int ttl: Lifetime of each token, in seconds
        :param int renewal_margin: Seconds before expiry at which a new token is signed

        :raises: SasTokenError if the key cannot be used for signing
        """
        if renewal_margin >= ttl:
            raise ValueError("renewal_margin must be shorter than ttl")
        self._resource = urllib.parse.quote_plus(host_name)
        self._signing_key = decode_key(key)
        self._policy_name = policy_name
        self.ttl = ttl
        self._renewal_margin = renewal_margin
        self._renew()

    def get_token(self):
        """Return a token valid for at least the renewal margin"""
        if time.time() >= self.expiry_time - self._renewal_margin:
            self._renew()
        return self._token

    def _renew(self):
        self.expiry_time = int(time.time() + self.ttl)
        self._token = SERVICE_TOKEN_FORMAT.format(
            resource=self._resource,
            signature=sign(self._signing_key, self._resource, self.expiry_time),
            expiry=self.expiry_time,
            policy=self._policy_name,
        )
        logger.debug(
            "Signed SasToken for {} expiring at {}".format(self._resource, self.expiry_time)
        )
