# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Device side of the registry sample: send a few telemetry messages as the
freshly provisioned device"""

import json
import logging
import random
import uuid
from azure.iot.device import IoTHubDeviceClient, Message
from .config import TransportType
from .constant import DEFAULT_MESSAGE_COUNT

logger = logging.getLogger(__name__)

TEMPERATURE = 20.0
HUMIDITY = 60
TEMPERATURE_ALERT_THRESHOLD = 30


class MessageSample(object):
    """Sends a burst of telemetry messages through an IoTHubDeviceClient"""

    def __init__(self, device_client, message_count=DEFAULT_MESSAGE_COUNT):
        if device_client is None:
            raise ValueError("device_client must not be None")
        self._device_client = device_client
        self._message_count = message_count

    @classmethod
    def from_connection_string(
        cls, connection_string, transport=TransportType.MQTT, message_count=DEFAULT_MESSAGE_COUNT
    ):
        """Create a MessageSample for the device identified by a device connection string.

        :param str connection_string: HostName=...;DeviceId=...;SharedAccessKey=...
        :param transport: MQTT, or MQTT over websockets
        :type transport: :class:`azure.iot.registry_sample.config.TransportType`
        :param int message_count: Number of messages sent by run()
        """
        device_client = IoTHubDeviceClient.create_from_connection_string(
            connection_string, websockets=(TransportType(transport) == TransportType.MQTT_WS)
        )
        return cls(device_client, message_count)

    def run(self):
        """Connect, send the messages and shut the client down.

        :returns: The number of messages sent.
        """
        sent = 0
        try:
            self._device_client.connect()
            print("Device sending {} messages to IoTHub...".format(self._message_count))
            for i in range(self._message_count):
                self._device_client.send_message(self._create_message(i))
                sent += 1
                print("\t- Testing device sent message {}".format(i))
        finally:
            logger.debug("Shutting down device client after {} messages".format(sent))
            self._device_client.shutdown()
        return sent

    def _create_message(self, i):
        temperature = TEMPERATURE + (random.random() * 15)
        humidity = HUMIDITY + (random.random() * 20)
        msg = Message(
            json.dumps({"messageNumber": i, "temperature": temperature, "humidity": humidity})
        )
        msg.message_id = uuid.uuid4()
        msg.content_encoding = "utf-8"
        msg.content_type = "application/json"
        msg.custom_properties["temperatureAlert"] = (
            "true" if temperature > TEMPERATURE_ALERT_THRESHOLD else "false"
        )
        return msg
