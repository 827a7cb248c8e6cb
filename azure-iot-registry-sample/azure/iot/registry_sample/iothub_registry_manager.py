# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
import logging
from msrest import Configuration, Serializer, Deserializer
from msrest.exceptions import HttpOperationError
from msrest.service_client import SDKClient
from . import models
from .auth import ConnectionStringAuthentication
from .constant import IOTHUB_API_VERSION, USER_AGENT, DEFAULT_DEVICE_STATUS
from .models import (
    AuthenticationMechanism,
    AuthenticationType,
    Device,
    QueryResult,
    SymmetricKey,
    X509Thumbprint,
)

logger = logging.getLogger(__name__)

DEVICE_URL = "/devices/{id}"
TWIN_URL = "/twins/{id}"
QUERY_URL = "/devices/query"

CONTINUATION_HEADER = "x-ms-continuation"
MAX_ITEM_COUNT_HEADER = "x-ms-max-item-count"
ITEM_TYPE_HEADER = "x-ms-item-type"


def _ensure_quoted(etag):
    if not isinstance(etag, str) or (len(etag) > 1 and etag[0] == '"' and etag[-1] == '"'):
        return etag
    return '"' + etag + '"'


class IoTHubRegistryManagerConfiguration(Configuration):
    """Configuration for IoTHubRegistryManager

    :param credentials: Credentials used to sign every request.
    :type credentials: ~azure.iot.registry_sample.auth.ConnectionStringAuthentication
    :param str base_url: Service URL
    """

    def __init__(self, credentials, base_url):
        if credentials is None:
            raise ValueError("Parameter 'credentials' must not be None.")

        super(IoTHubRegistryManagerConfiguration, self).__init__(base_url)

        self.add_user_agent(USER_AGENT)

        self.credentials = credentials


class IoTHubRegistryManager(SDKClient):
    """Device identity and twin operations of the IoTHub registry, over REST.

    Each method is a single request/response exchange. Failures are raised as
    the msrest exceptions the service client library raises:
    `HttpOperationError<msrest.exceptions.HttpOperationError>` for an
    unexpected status code and
    `ClientRequestError<msrest.exceptions.ClientRequestError>` when the
    request could not be sent.
    """

    def __init__(self, connection_string):
        """Initializer for a Registry Manager Service client.

        :param str connection_string: The IoTHub connection string used to authenticate connection
            with IoTHub. It must carry HostName, SharedAccessKeyName and SharedAccessKey.

        :raises: ValueError if the connection string is invalid.
        """
        credentials = ConnectionStringAuthentication(connection_string)
        self.config = IoTHubRegistryManagerConfiguration(
            credentials, "https://" + credentials.host_name
        )
        super(IoTHubRegistryManager, self).__init__(self.config.credentials, self.config)

        client_models = {k: v for k, v in models.__dict__.items() if isinstance(v, type)}
        self.api_version = IOTHUB_API_VERSION
        self._serialize = Serializer(client_models)
        self._deserialize = Deserializer(client_models)

    @classmethod
    def from_connection_string(cls, connection_string):
        """Classmethod initializer for a Registry Manager Service client.

        :param str connection_string: The IoTHub connection string used to authenticate connection
            with IoTHub.

        :rtype: :class:`azure.iot.registry_sample.IoTHubRegistryManager`
        """
        return cls(connection_string)

    @property
    def host_name(self):
        return self.config.credentials.host_name

    def create_device_with_sas(
        self, device_id, primary_key=None, secondary_key=None, status=DEFAULT_DEVICE_STATUS
    ):
        """Creates a device identity on IoTHub using SAS authentication.

        :param str device_id: The name (Id) of the device.
        :param str primary_key: Primary authentication key. Generated by the service if None.
        :param str secondary_key: Secondary authentication key. Generated by the service if None.
        :param str status: Initial state of the created device.
            (Possible values: "enabled" or "disabled")

        :raises: `HttpOperationError<msrest.exceptions.HttpOperationError>`
            if the HTTP response status is not in [200].

        :returns: Device object containing the created device.
        """
        symmetric_key = SymmetricKey(primary_key=primary_key, secondary_key=secondary_key)
        device = Device(
            device_id=device_id,
            status=status,
            authentication=AuthenticationMechanism(
                type=AuthenticationType.SAS, symmetric_key=symmetric_key
            ),
        )
        return self._put_device(device_id, device)

    def create_device_with_x509(
        self, device_id, primary_thumbprint, secondary_thumbprint, status=DEFAULT_DEVICE_STATUS
    ):
        """Creates a device identity on IoTHub using X509 (self signed) authentication.

        :param str device_id: The name (Id) of the device.
        :param str primary_thumbprint: Primary X509 thumbprint.
        :param str secondary_thumbprint: Secondary X509 thumbprint.
        :param str status: Initial state of the created device.
            (Possible values: "enabled" or "disabled")

        :raises: `HttpOperationError<msrest.exceptions.HttpOperationError>`
            if the HTTP response status is not in [200].

        :returns: Device object containing the created device.
        """
        x509_thumbprint = X509Thumbprint(
            primary_thumbprint=primary_thumbprint, secondary_thumbprint=secondary_thumbprint
        )
        device = Device(
            device_id=device_id,
            status=status,
            authentication=AuthenticationMechanism(
                type=AuthenticationType.SELF_SIGNED, x509_thumbprint=x509_thumbprint
            ),
        )
        return self._put_device(device_id, device)

    def create_device_with_certificate_authority(self, device_id, status=DEFAULT_DEVICE_STATUS):
        """Creates a device identity on IoTHub using certificate authority.

        :param str device_id: The name (Id) of the device.
        :param str status: Initial state of the created device.
            (Possible values: "enabled" or "disabled").

        :raises: `HttpOperationError<msrest.exceptions.HttpOperationError>`
            if the HTTP response status is not in [200].

        :returns: Device object containing the created device.
        """
        device = Device(
            device_id=device_id,
            status=status,
            authentication=AuthenticationMechanism(type=AuthenticationType.CERTIFICATE_AUTHORITY),
        )
        return self._put_device(device_id, device)

    def delete_device(self, device_id, etag=None):
        """Deletes a device identity from IoTHub.

        :param str device_id: The name (Id) of the device.
        :param str etag: The etag (if_match) value to use for the delete operation.
            Any version is deleted when None.

        :raises: `HttpOperationError<msrest.exceptions.HttpOperationError>`
            if the HTTP response status is not in [200, 204].

        :returns: None.
        """
        if etag is None:
            etag = "*"

        url = self._format_url(DEVICE_URL, device_id)
        header_parameters = self._header_parameters(etag)
        request = self._client.delete(url, self._query_parameters(), header_parameters)
        self._send(request, [200, 204])

    def get_twin(self, device_id):
        """Gets a device twin.

        :param str device_id: The name (Id) of the device.

        :raises: `HttpOperationError<msrest.exceptions.HttpOperationError>`
            if the HTTP response status is not in [200].

        :returns: The Twin object.
        """
        url = self._format_url(TWIN_URL, device_id)
        request = self._client.get(url, self._query_parameters(), self._header_parameters())
        response = self._send(request, [200])
        return self._deserialize("Twin", response)

    def update_twin(self, device_id, device_twin, etag=None):
        """Updates tags and desired properties of a device twin.

        The service rejects the update with 412 (Precondition Failed) when the
        etag no longer matches the twin.

        :param str device_id: The name (Id) of the device.
        :param Twin device_twin: The twin patch.
        :param str etag: The etag (if_match) value to use for the update operation.

        :raises: `HttpOperationError<msrest.exceptions.HttpOperationError>`
            if the HTTP response status is not in [200].

        :returns: The Twin object.
        """
        if etag is None:
            etag = "*"

        url = self._format_url(TWIN_URL, device_id)
        header_parameters = self._header_parameters(etag, has_body=True)
        body_content = self._serialize.body(device_twin, "Twin")
        request = self._client.patch(
            url, self._query_parameters(), header_parameters, body_content
        )
        response = self._send(request, [200])
        return self._deserialize("Twin", response)

    def query_iot_hub(self, query_specification, continuation_token=None, max_item_count=None):
        """Query an IoTHub to retrieve information regarding device twins using a
           SQL-like language.
           See https://docs.microsoft.com/azure/iot-hub/iot-hub-devguide-query-language
           for more information. Pagination of results is supported. This returns
           information about device twins only.

        :param QuerySpecification query_specification: The query specification.
        :param str continuation_token: Continuation token for paging
        :param int max_item_count: Maximum number of requested device twins

        :raises: `HttpOperationError<msrest.exceptions.HttpOperationError>`
            if the HTTP response status is not in [200].

        :returns: The QueryResult object.
        """
        url = self._client.format_url(QUERY_URL)
        header_parameters = self._header_parameters(has_body=True)
        if continuation_token is not None:
            header_parameters[CONTINUATION_HEADER] = self._serialize.header(
                "continuation_token", continuation_token, "str"
            )
        if max_item_count is not None:
            header_parameters[MAX_ITEM_COUNT_HEADER] = self._serialize.header(
                "max_item_count", max_item_count, "str"
            )
        body_content = self._serialize.body(query_specification, "QuerySpecification")
        request = self._client.post(url, self._query_parameters(), header_parameters, body_content)
        response = self._send(request, [200])

        query_result = QueryResult()
        query_result.type = response.headers.get(ITEM_TYPE_HEADER)
        query_result.continuation_token = response.headers.get(CONTINUATION_HEADER) or None
        query_result.items = self._deserialize("[Twin]", response) or []
        return query_result

    def _put_device(self, device_id, device):
        url = self._format_url(DEVICE_URL, device_id)
        header_parameters = self._header_parameters(has_body=True)
        body_content = self._serialize.body(device, "Device")
        request = self._client.put(url, self._query_parameters(), header_parameters, body_content)
        response = self._send(request, [200])
        return self._deserialize("Device", response)

    def _format_url(self, url, device_id):
        path_format_arguments = {"id": self._serialize.url("id", device_id, "str")}
        return self._client.format_url(url, **path_format_arguments)

    def _query_parameters(self):
        return {"api-version": self._serialize.query("self.api_version", self.api_version, "str")}

    def _header_parameters(self, etag=None, has_body=False):
        header_parameters = {"Accept": "application/json"}
        if has_body:
            header_parameters["Content-Type"] = "application/json; charset=utf-8"
        if etag is not None:
            header_parameters["If-Match"] = self._serialize.header(
                "if_match", _ensure_quoted(etag), "str"
            )
        return header_parameters

    def _send(self, request, expected_status_codes):
        logger.debug("{} {}".format(request.method, request.url))
        response = self._client.send(request, stream=False)
        if response.status_code not in expected_status_codes:
            logger.debug(
                "{} {} returned unexpected status {}".format(
                    request.method, request.url, response.status_code
                )
            )
            raise HttpOperationError(self._deserialize, response)
        return response
