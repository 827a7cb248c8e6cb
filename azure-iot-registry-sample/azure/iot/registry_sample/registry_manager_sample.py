# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the RegistryManagerSample, which walks through the
device identity and twin operations of an IoTHub registry"""

import contextlib
import logging
import uuid
from .config import TransportType, X509Thumbprints
from .connection_string import get_host_name, create_device_connection_string
from .constant import DEVICE_ID_PREFIX, DEVICES_QUERY, CUSTOM_DESIRED_PROPERTIES
from .exceptions import CleanupError, ParseError, handle_service_errors
from .message_sample import MessageSample
from .models import QuerySpecification, Twin, TwinProperties

logger = logging.getLogger(__name__)

TWIN_LINE_FORMAT = "\t{0:<50} : {1:>10} : Last seen: {2:<10}"


def _default_message_sample_factory(device_connection_string, transport):
    return MessageSample.from_connection_string(device_connection_string, transport)


class RegistryManagerSample(object):
    """Drives an IoTHub registry through a registry manager and reports each
    step on the console.

    Registry failures are raised as
    :class:`azure.iot.registry_sample.exceptions.RegistrySampleError` subclasses.
    """

    def __init__(
        self,
        registry_manager,
        connection_string,
        thumbprints=None,
        message_sample_factory=None,
        transport=TransportType.MQTT,
    ):
        """Initializer for a RegistryManagerSample.

        :param registry_manager: Client for the IoTHub registry, usually an
            :class:`azure.iot.registry_sample.IoTHubRegistryManager`.
        :param str connection_string: The IoTHub service connection string. Only its
            HostName is used, to build device connection strings.
        :param thumbprints: Thumbprints used for self signed devices when none are given.
        :type thumbprints: :class:`azure.iot.registry_sample.config.X509Thumbprints`
        :param message_sample_factory: Callable taking a device connection string and a
            transport, returning an object with a run() method. Defaults to
            :meth:`MessageSample.from_connection_string`.
        :param transport: Transport handed to the message sample factory.

        :raises: ValueError if registry_manager is None.
        """
        if registry_manager is None:
            raise ValueError("registry_manager must not be None")
        self._registry_manager = registry_manager
        self._connection_string = connection_string
        self._thumbprints = thumbprints if thumbprints is not None else X509Thumbprints()
        self._message_sample_factory = message_sample_factory or _default_message_sample_factory
        self._transport = transport

    def run_sample(self, device_id=None):
        """Add a device, send messages as that device, then remove it.

        The device is removed whether or not the messaging step succeeds.

        :param str device_id: Device to create. Defaults to a new unique id.
        :returns: The id of the device used.
        """
        if device_id is None:
            device_id = DEVICE_ID_PREFIX + str(uuid.uuid4())

        with self.provisioned_device(device_id) as device:
            host_name = get_host_name(self._connection_string)
            if not host_name:
                raise ParseError("Unable to find HostName in the IoTHub connection string")

            device_connection_string = create_device_connection_string(
                host_name, device.device_id, device.authentication.symmetric_key.primary_key
            )
            message_sample = self._message_sample_factory(device_connection_string, self._transport)
            message_sample.run()

        return device_id

    @contextlib.contextmanager
    def provisioned_device(self, device_id):
        """Context manager adding a device with default authentication on entry
        and removing it on exit.

        If the add itself fails, nothing is removed. If the body raises and the
        removal fails as well, a CleanupError carrying both is raised.

        :param str device_id: The name (Id) of the device.
        :returns: The created Device.
        """
        device = self.add_device(device_id)
        try:
            yield device
        except BaseException as e:
            try:
                self.remove_device(device_id)
            except Exception as cleanup_error:
                logger.error(
                    "Failed to remove device '{}' after error: {}".format(device_id, cleanup_error)
                )
                raise CleanupError(
                    "Removing device '{}' failed after an earlier error".format(device_id),
                    error=e,
                    cleanup_error=cleanup_error,
                ) from e
            raise
        else:
            self.remove_device(device_id)

    def add_device(self, device_id):
        """Add a device using SAS authentication with service generated keys.

        :param str device_id: The name (Id) of the device.
        :returns: The created Device, including its keys.
        """
        print("Adding device '{}' with default authentication . . . ".format(device_id), end="")
        with handle_service_errors("Adding device '{}'".format(device_id)):
            device = self._registry_manager.create_device_with_sas(device_id)
        print("DONE")
        logger.info("Added device '{}'".format(device_id))
        return device

    def add_device_with_self_signed_certificate(
        self, device_id, primary_thumbprint=None, secondary_thumbprint=None
    ):
        """Add a device authenticated by self signed X509 certificates.

        :param str device_id: The name (Id) of the device.
        :param str primary_thumbprint: Defaults to the configured primary thumbprint.
        :param str secondary_thumbprint: Defaults to the configured secondary thumbprint.
        :returns: The created Device.
        """
        if primary_thumbprint is None:
            primary_thumbprint = self._thumbprints.primary_thumbprint
        if secondary_thumbprint is None:
            secondary_thumbprint = self._thumbprints.secondary_thumbprint

        print(
            "Adding device '{}' with self signed certificate auth . . . ".format(device_id), end=""
        )
        with handle_service_errors("Adding self signed device '{}'".format(device_id)):
            device = self._registry_manager.create_device_with_x509(
                device_id, primary_thumbprint, secondary_thumbprint
            )
        print("DONE")
        return device

    def add_device_with_certificate_authority(self, device_id):
        """Add a device authenticated by a CA signed X509 certificate.

        :param str device_id: The name (Id) of the device.
        :returns: The created Device.
        """
        print("Adding device '{}' with CA authentication . . . ".format(device_id), end="")
        with handle_service_errors("Adding CA device '{}'".format(device_id)):
            device = self._registry_manager.create_device_with_certificate_authority(device_id)
        print("DONE")
        return device

    def remove_device(self, device_id):
        print("Remove device '{}' . . . ".format(device_id), end="")
        with handle_service_errors("Removing device '{}'".format(device_id)):
            self._registry_manager.delete_device(device_id)
        print("Done")
        logger.info("Removed device '{}'".format(device_id))

    def get_twin(self, device_id):
        with handle_service_errors("Reading twin of '{}'".format(device_id)):
            return self._registry_manager.get_twin(device_id)

    def update_desired_properties(self, device_id, twin=None, desired=None):
        """Merge properties into the desired properties of a device twin.

        The update is guarded by the etag of the twin, so it fails if the twin
        changed since it was read.

        :param str device_id: The name (Id) of the device.
        :param Twin twin: A previously read twin whose etag guards the update.
            The twin is read first when None.
        :param dict desired: Properties to merge. Defaults to {"customKey": "customValue"}.
        :raises: ConflictError if the etag is stale.
        :returns: The updated Twin.
        """
        if twin is None:
            twin = self.get_twin(device_id)
        if desired is None:
            desired = dict(CUSTOM_DESIRED_PROPERTIES)

        twin_patch = Twin(properties=TwinProperties(desired=desired))
        with handle_service_errors("Updating twin of '{}'".format(device_id)):
            return self._registry_manager.update_twin(twin.device_id, twin_patch, twin.etag)

    def query_twin_pages(self, query=DEVICES_QUERY, max_item_count=None):
        """Lazily run a twin query, one request per page.

        Nothing is sent until iteration starts; calling this again starts over.

        :param str query: IoTHub query language statement.
        :param int max_item_count: Maximum number of twins per page.
        :returns: Generator of lists of Twin.
        """
        query_specification = QuerySpecification(query=query)
        continuation_token = None
        while True:
            with handle_service_errors("Querying '{}'".format(query)):
                query_result = self._registry_manager.query_iot_hub(
                    query_specification, continuation_token, max_item_count
                )
            page = list(query_result.items or [])
            logger.debug("Query page with {} items".format(len(page)))
            yield page
            continuation_token = query_result.continuation_token
            if not continuation_token:
                break

    def enumerate_twins(self, query=DEVICES_QUERY, max_item_count=None):
        """Lazily iterate over every twin matched by a query, across pages."""
        for page in self.query_twin_pages(query, max_item_count):
            for twin in page:
                yield twin

    def print_twins(self, query=DEVICES_QUERY):
        """Print one line per twin.

        :returns: The number of twins printed.
        """
        print("Querying devices:")
        count = 0
        for twin in self.enumerate_twins(query):
            print(
                TWIN_LINE_FORMAT.format(
                    str(twin.device_id), str(twin.connection_state), str(twin.last_activity_time)
                )
            )
            count += 1
        return count
