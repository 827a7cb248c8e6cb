# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains tools for working with Connection Strings"""

import re
from .sastoken import SasTokenError, decode_key

__all__ = ["ConnectionString", "get_host_name", "create_device_connection_string"]

CS_DELIMITER = ";"
CS_VAL_SEPARATOR = "="

HOST_NAME = "HostName"
SHARED_ACCESS_KEY_NAME = "SharedAccessKeyName"
SHARED_ACCESS_KEY = "SharedAccessKey"
SHARED_ACCESS_SIGNATURE = "SharedAccessSignature"
DEVICE_ID = "DeviceId"
MODULE_ID = "ModuleId"
GATEWAY_HOST_NAME = "GatewayHostName"

_valid_keys = [
    HOST_NAME,
    SHARED_ACCESS_KEY_NAME,
    SHARED_ACCESS_KEY,
    SHARED_ACCESS_SIGNATURE,
    DEVICE_ID,
    MODULE_ID,
    GATEWAY_HOST_NAME,
]

_host_name_regex = re.compile(HOST_NAME + CS_VAL_SEPARATOR + "([^" + CS_DELIMITER + "]+)")


def _parse_connection_string(connection_string):
    """Return a dictionary of values contained in a given connection string
    """
    try:
        cs_args = connection_string.split(CS_DELIMITER)
        d = dict(arg.split(CS_VAL_SEPARATOR, 1) for arg in cs_args)
    except (AttributeError, ValueError) as e:
        raise ValueError("Invalid Connection String - Unable to parse") from e
    if len(cs_args) != len(d):
        # duplicate args
        raise ValueError("Invalid Connection String - Unable to parse")
    if not all(key in _valid_keys for key in d.keys()):
        raise ValueError("Invalid Connection String - Invalid Key")
    _validate_keys(d)
    return d


def _validate_keys(d):
    """Raise ValueError if the dict d does not hold service (hub owner) credentials
    """
    if not (d.get(HOST_NAME) and d.get(SHARED_ACCESS_KEY_NAME) and d.get(SHARED_ACCESS_KEY)):
        raise ValueError("Invalid Connection String - Incomplete")
    try:
        decode_key(d[SHARED_ACCESS_KEY])
    except SasTokenError as e:
        raise ValueError("Invalid Connection String - SharedAccessKey is not base64") from e


def get_host_name(connection_string):
    """Extract the IoTHub host name from a connection string.

    Unlike :class:`ConnectionString` this does no validation: it only looks for
    the first ``HostName=`` entry.

    :param str connection_string: Semicolon delimited Key=Value connection string
    :returns: The host name, or an empty string if there is none.
    :rtype: str
    """
    match = _host_name_regex.search(connection_string or "")
    if match is None:
        return ""
    return match.group(1)


def create_device_connection_string(host_name, device_id, shared_access_key):
    """Build a connection string a device can use to authenticate with IoTHub.

    :param str host_name: The IoTHub host name
    :param str device_id: The name (Id) of the device
    :param str shared_access_key: The device's symmetric key
    :rtype: str
    """
    return CS_DELIMITER.join(
        [
            HOST_NAME + CS_VAL_SEPARATOR + host_name,
            DEVICE_ID + CS_VAL_SEPARATOR + device_id,
            SHARED_ACCESS_KEY + CS_VAL_SEPARATOR + shared_access_key,
        ]
    )


class ConnectionString(object):
    """Key/value mappings for connection details.
    Uses the same syntax as dictionary
    """

    def __init__(self, connection_string):
        """Initializer for ConnectionString

        :param str connection_string: String with connection details provided by Azure
        :raises: ValueError if provided connection_string is invalid
        """
        self._dict = _parse_connection_string(connection_string)
        self._strrep = connection_string

    def __getitem__(self, key):
        return self._dict[key]

    def __repr__(self):
        return self._strrep

    @property
    def host_name(self):
        return self._dict[HOST_NAME]
