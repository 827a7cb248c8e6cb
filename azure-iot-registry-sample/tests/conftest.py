# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import base64
import http.client
import json
import pytest
import requests
from msrest.exceptions import HttpOperationError
from azure.iot.registry_sample.models import (
    AuthenticationMechanism,
    AuthenticationType,
    Device,
    QueryResult,
    SymmetricKey,
    Twin,
    TwinProperties,
    X509Thumbprint,
)

"""---Constants---"""

fake_hostname = "beauxbatons.academy-net"
fake_shared_access_key_name = "alohomora"
fake_shared_access_key = "Zm9vYmFy"
fake_service_connection_string = "HostName={};SharedAccessKeyName={};SharedAccessKey={}".format(
    fake_hostname, fake_shared_access_key_name, fake_shared_access_key
)


"""----Helpers----"""


def create_response(status_code, body=None, headers=None):
    """Build a requests.Response the way msrest hands it back from ServiceClient.send"""
    response = requests.Response()
    response.status_code = status_code
    response.reason = http.client.responses.get(status_code, "")
    response.encoding = "utf-8"
    response._content = json.dumps(body).encode("utf-8") if body is not None else b""
    response.headers["Content-Type"] = "application/json; charset=utf-8"
    if headers:
        response.headers.update(headers)
    return response


def create_http_operation_error(status_code):
    return HttpOperationError(None, create_response(status_code))


class FakeRegistryManager(object):
    """In-memory stand-in for IoTHubRegistryManager with the service's
    conflict, not found, and etag behavior"""

    def __init__(self, page_size=2):
        self.devices = {}
        self.twins = {}
        self.page_size = page_size
        self.query_calls = []
        self._etag_counter = 0

    def _next_etag(self):
        self._etag_counter += 1
        return base64.b64encode(str(self._etag_counter).encode("utf-8")).decode("utf-8")

    def _add(self, device_id, authentication, status):
        if device_id in self.devices:
            raise create_http_operation_error(409)
        device = Device(
            device_id=device_id,
            status=status,
            etag=self._next_etag(),
            connection_state="Disconnected",
            authentication=authentication,
        )
        self.devices[device_id] = device
        self.twins[device_id] = Twin(
            device_id=device_id,
            etag=self._next_etag(),
            version=1,
            status=status,
            connection_state="Disconnected",
            authentication_type=authentication.type,
            properties=TwinProperties(desired={}, reported={}),
        )
        return device

    def create_device_with_sas(self, device_id, primary_key=None, secondary_key=None, status="enabled"):
        symmetric_key = SymmetricKey(
            primary_key=primary_key or base64.b64encode(b"primary-" + device_id.encode()).decode(),
            secondary_key=secondary_key
            or base64.b64encode(b"secondary-" + device_id.encode()).decode(),
        )
        return self._add(
            device_id,
            AuthenticationMechanism(type=AuthenticationType.SAS, symmetric_key=symmetric_key),
            status,
        )

    def create_device_with_x509(
        self, device_id, primary_thumbprint, secondary_thumbprint, status="enabled"
    ):
        x509_thumbprint = X509Thumbprint(
            primary_thumbprint=primary_thumbprint, secondary_thumbprint=secondary_thumbprint
        )
        return self._add(
            device_id,
            AuthenticationMechanism(
                type=AuthenticationType.SELF_SIGNED, x509_thumbprint=x509_thumbprint
            ),
            status,
        )

    def create_device_with_certificate_authority(self, device_id, status="enabled"):
        return self._add(
            device_id,
            AuthenticationMechanism(type=AuthenticationType.CERTIFICATE_AUTHORITY),
            status,
        )

    def delete_device(self, device_id, etag=None):
        if device_id not in self.devices:
            raise create_http_operation_error(404)
        del self.devices[device_id]
        del self.twins[device_id]

    def get_twin(self, device_id):
        if device_id not in self.twins:
            raise create_http_operation_error(404)
        stored = self.twins[device_id]
        # Hand out a copy, as the service would
        return Twin(
            device_id=stored.device_id,
            etag=stored.etag,
            version=stored.version,
            connection_state=stored.connection_state,
            properties=TwinProperties(
                desired=dict(stored.properties.desired), reported=dict(stored.properties.reported)
            ),
        )

    def update_twin(self, device_id, device_twin, etag=None):
        if device_id not in self.twins:
            raise create_http_operation_error(404)
        stored = self.twins[device_id]
        if etag is not None and etag != "*" and etag.strip('"') != stored.etag:
            raise create_http_operation_error(412)
        stored.properties.desired.update(device_twin.properties.desired)
        stored.etag = self._next_etag()
        stored.version += 1
        return self.get_twin(device_id)

    def query_iot_hub(self, query_specification, continuation_token=None, max_item_count=None):
        self.query_calls.append((query_specification.query, continuation_token, max_item_count))
        page_size = max_item_count or self.page_size
        start = int(continuation_token) if continuation_token else 0
        twins = list(self.twins.values())
        end = start + page_size
        return QueryResult(
            type="twin",
            items=twins[start:end],
            continuation_token=str(end) if end < len(twins) else None,
        )


"""----Shared fixtures----"""


@pytest.fixture(scope="function")
def fake_registry_manager():
    return FakeRegistryManager()


@pytest.fixture(scope="function")
def mock_message_sample(mocker):
    return mocker.MagicMock()


@pytest.fixture(scope="function")
def mock_message_sample_factory(mocker, mock_message_sample):
    return mocker.MagicMock(return_value=mock_message_sample)


@pytest.fixture(scope="function")
def http_error_factory():
    return create_http_operation_error


@pytest.fixture(scope="function")
def response_factory():
    return create_response
