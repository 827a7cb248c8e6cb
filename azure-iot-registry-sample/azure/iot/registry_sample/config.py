# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import logging
import os
from enum import Enum
from typing import Mapping, Optional
from .constant import DEFAULT_MESSAGE_COUNT

logger = logging.getLogger(__name__)

CONNECTION_STRING_VAR = "IOTHUB_CONNECTION_STRING"
PRIMARY_THUMBPRINT_VAR = "IOTHUB_PFX_X509_THUMBPRINT"
SECONDARY_THUMBPRINT_VAR = "IOTHUB_PFX_X509_THUMBPRINT2"
TRANSPORT_VAR = "IOTHUB_DEVICE_TRANSPORT"
MESSAGE_COUNT_VAR = "IOTHUB_MESSAGE_COUNT"


class TransportType(str, Enum):
    """Transport used by the device side of the sample"""

    MQTT = "mqtt"
    MQTT_WS = "mqttws"


class X509Thumbprints:
    """
    Thumbprints used when adding self signed X509 devices.
    """

    def __init__(
        self, primary_thumbprint: Optional[str] = None, secondary_thumbprint: Optional[str] = None
    ) -> None:
        """
        :param str primary_thumbprint: Thumbprint of the primary client certificate
        :param str secondary_thumbprint: Thumbprint of the secondary client certificate
        """
        self.primary_thumbprint = primary_thumbprint
        self.secondary_thumbprint = secondary_thumbprint

    def __repr__(self) -> str:
        return "X509Thumbprints(primary_thumbprint={!r}, secondary_thumbprint={!r})".format(
            self.primary_thumbprint, self.secondary_thumbprint
        )


class SampleConfig:
    """
    Class for storing all options of a registry sample run.
    """

    def __init__(
        self,
        *,
        connection_string: str,
        thumbprints: Optional[X509Thumbprints] = None,
        transport: TransportType = TransportType.MQTT,
        message_count: int = DEFAULT_MESSAGE_COUNT,
        enumerate_twins: bool = False,
    ) -> None:
        """Initializer for SampleConfig

        :param str connection_string: IoTHub service connection string
        :param thumbprints: Thumbprints for self signed X509 devices
        :type thumbprints: :class:`X509Thumbprints`
        :param transport: Transport used by the device client
        :type transport: :class:`TransportType`
        :param int message_count: Number of telemetry messages the device sends
        :param bool enumerate_twins: Whether to list all device twins before running
        """
        if not connection_string:
            raise ValueError("A service connection string is required")
        if message_count < 0:
            raise ValueError("message_count cannot be negative")
        self.connection_string = connection_string
        self.thumbprints = thumbprints if thumbprints is not None else X509Thumbprints()
        self.transport = TransportType(transport)
        self.message_count = message_count
        self.enumerate_twins = enumerate_twins

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None, **kwargs) -> "SampleConfig":
        """Build a SampleConfig from environment variables.

        Values given in kwargs take precedence over the environment.

        :param environ: Mapping to read instead of os.environ
        :raises: ValueError if the connection string is missing or a value is invalid
        """
        if environ is None:
            environ = os.environ

        connection_string = environ.get(CONNECTION_STRING_VAR)
        if not connection_string:
            raise ValueError("Environment variable {} is not set".format(CONNECTION_STRING_VAR))

        options = {
            "connection_string": connection_string,
            "thumbprints": X509Thumbprints(
                environ.get(PRIMARY_THUMBPRINT_VAR), environ.get(SECONDARY_THUMBPRINT_VAR)
            ),
            "transport": _parse_transport(environ.get(TRANSPORT_VAR, TransportType.MQTT.value)),
            "message_count": _parse_message_count(environ.get(MESSAGE_COUNT_VAR)),
        }
        options.update({k: v for k, v in kwargs.items() if v is not None})
        logger.debug(
            "Loaded sample configuration (transport={}, message_count={})".format(
                options["transport"], options["message_count"]
            )
        )
        return cls(**options)


def _parse_transport(value):
    try:
        return TransportType(value.lower())
    except ValueError:
        raise ValueError(
            "Invalid transport '{}'. Valid transports: {}".format(
                value, ", ".join(t.value for t in TransportType)
            )
        ) from None


def _parse_message_count(value):
    if value is None:
        return DEFAULT_MESSAGE_COUNT
    try:
        return int(value)
    except ValueError:
        raise ValueError("Invalid message count '{}'".format(value)) from None
