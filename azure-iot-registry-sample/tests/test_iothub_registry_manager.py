# --------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import datetime
import json
import pytest
from msrest.exceptions import HttpOperationError
from msrest.service_client import ServiceClient
from azure.iot.registry_sample.iothub_registry_manager import IoTHubRegistryManager
from azure.iot.registry_sample.auth import ConnectionStringAuthentication
from azure.iot.registry_sample.models import QuerySpecification, Twin, TwinProperties

"""---Constants---"""

fake_shared_access_key = "Zm9vYmFy"
fake_shared_access_key_name = "alohomora"
fake_hostname = "beauxbatons.academy-net"
fake_device_id = "MyPensieve"
fake_primary_key = "cGV0cmlmaWN1cw=="
fake_secondary_key = "dG90YWx1cw=="
fake_primary_thumbprint = "HELFKCPOXAIR9PVNOA3"
fake_secondary_thumbprint = "RGSHARLU4VYYFENINUF"
fake_etag = "taggedbymisnitryofmagic"
fake_continuation_token = "fake_continuation_token"
fake_api_version = "2021-04-12"

fake_device_url = "https://{}/devices/{}?api-version={}".format(
    fake_hostname, fake_device_id, fake_api_version
)
fake_twin_url = "https://{}/twins/{}?api-version={}".format(
    fake_hostname, fake_device_id, fake_api_version
)
fake_query_url = "https://{}/devices/query?api-version={}".format(fake_hostname, fake_api_version)

fake_device_body = {
    "deviceId": fake_device_id,
    "etag": fake_etag,
    "status": "enabled",
    "connectionState": "Disconnected",
    "authentication": {
        "type": "sas",
        "symmetricKey": {"primaryKey": fake_primary_key, "secondaryKey": fake_secondary_key},
    },
}
fake_twin_body = {
    "deviceId": fake_device_id,
    "etag": fake_etag,
    "version": 3,
    "connectionState": "Connected",
    "lastActivityTime": "2024-01-02T03:04:05Z",
    "properties": {"desired": {"customKey": "customValue"}, "reported": {}},
}


"""----Shared fixtures----"""


@pytest.fixture(scope="function")
def connection_string():
    return "HostName={hostname};SharedAccessKeyName={skn};SharedAccessKey={sk}".format(
        hostname=fake_hostname, skn=fake_shared_access_key_name, sk=fake_shared_access_key
    )


@pytest.fixture(scope="function")
def iothub_registry_manager(connection_string):
    return IoTHubRegistryManager.from_connection_string(connection_string)


@pytest.fixture(scope="function")
def mock_send(mocker, response_factory):
    mock_send = mocker.patch.object(ServiceClient, "send")
    mock_send.return_value = response_factory(200, fake_device_body)
    return mock_send


def sent_request(mock_send):
    assert mock_send.call_count == 1
    return mock_send.call_args[0][0]


def sent_body(mock_send):
    return json.loads(sent_request(mock_send).data)


@pytest.mark.describe("IoTHubRegistryManager - .from_connection_string()")
class TestFromConnectionString(object):
    @pytest.mark.it("Authenticates with the connection string and targets the hub host over https")
    def test_connection_string_auth(self, connection_string):
        client = IoTHubRegistryManager.from_connection_string(connection_string)

        assert isinstance(client.config.credentials, ConnectionStringAuthentication)
        assert repr(client.config.credentials) == connection_string
        assert client.config.base_url == "https://" + fake_hostname
        assert client.host_name == fake_hostname

    @pytest.mark.parametrize(
        "connection_string",
        [
            pytest.param("", id="empty connection string"),
            pytest.param(
                "SharedAccessKeyName={};SharedAccessKey={}".format(
                    fake_shared_access_key_name, fake_shared_access_key
                ),
                id="connection string without HostName",
            ),
            pytest.param(
                "HostName={};SharedAccessKey={}".format(fake_hostname, fake_shared_access_key),
                id="connection string without SharedAccessKeyName",
            ),
            pytest.param(
                "HostName={};SharedAccessKeyName={}".format(
                    fake_hostname, fake_shared_access_key_name
                ),
                id="connection string without SharedAccessKey",
            ),
            pytest.param(
                "HostName={};Color=blue".format(fake_hostname), id="connection string with unknown key"
            ),
            pytest.param(
                "HostName={};SharedAccessKeyName={};SharedAccessKey=abc".format(
                    fake_hostname, fake_shared_access_key_name
                ),
                id="SharedAccessKey not base64",
            ),
        ],
    )
    @pytest.mark.it("Raises a ValueError for a connection string without usable service credentials")
    def test_invalid_connection_string(self, connection_string):
        with pytest.raises(ValueError):
            IoTHubRegistryManager.from_connection_string(connection_string)


@pytest.mark.describe("IoTHubRegistryManager - .create_device_with_sas()")
class TestCreateDeviceWithSas(object):
    @pytest.mark.it("PUTs the device with sas authentication and returns the created Device")
    def test_create(self, iothub_registry_manager, mock_send):
        device = iothub_registry_manager.create_device_with_sas(
            fake_device_id, fake_primary_key, fake_secondary_key
        )

        request = sent_request(mock_send)
        assert request.method == "PUT"
        assert request.url == fake_device_url
        assert "If-Match" not in request.headers
        body = json.loads(request.data)
        assert body["deviceId"] == fake_device_id
        assert body["status"] == "enabled"
        assert body["authentication"] == {
            "type": "sas",
            "symmetricKey": {"primaryKey": fake_primary_key, "secondaryKey": fake_secondary_key},
        }
        assert device.device_id == fake_device_id
        assert device.etag == fake_etag
        assert device.authentication.symmetric_key.primary_key == fake_primary_key

    @pytest.mark.it("Leaves the keys out so that IoTHub generates them")
    def test_generated_keys(self, iothub_registry_manager, mock_send):
        iothub_registry_manager.create_device_with_sas(fake_device_id)

        authentication = sent_body(mock_send)["authentication"]
        assert authentication["type"] == "sas"
        assert "primaryKey" not in authentication.get("symmetricKey", {})
        assert "secondaryKey" not in authentication.get("symmetricKey", {})

    @pytest.mark.it("Raises an HttpOperationError when the device already exists")
    def test_conflict(self, iothub_registry_manager, mock_send, response_factory):
        mock_send.return_value = response_factory(409, {"Message": "DeviceAlreadyExists"})

        with pytest.raises(HttpOperationError) as e_info:
            iothub_registry_manager.create_device_with_sas(fake_device_id)
        assert e_info.value.response.status_code == 409


@pytest.mark.describe("IoTHubRegistryManager - .create_device_with_x509()")
class TestCreateDeviceWithX509(object):
    @pytest.mark.it("PUTs the device with selfSigned authentication and both thumbprints")
    def test_create(self, iothub_registry_manager, mock_send):
        iothub_registry_manager.create_device_with_x509(
            fake_device_id, fake_primary_thumbprint, fake_secondary_thumbprint, "disabled"
        )

        request = sent_request(mock_send)
        body = json.loads(request.data)
        assert request.method == "PUT"
        assert request.url == fake_device_url
        assert body["status"] == "disabled"
        assert body["authentication"] == {
            "type": "selfSigned",
            "x509Thumbprint": {
                "primaryThumbprint": fake_primary_thumbprint,
                "secondaryThumbprint": fake_secondary_thumbprint,
            },
        }


@pytest.mark.describe("IoTHubRegistryManager - .create_device_with_certificate_authority()")
class TestCreateDeviceWithCertificateAuthority(object):
    @pytest.mark.it("PUTs the device with certificateAuthority authentication only")
    def test_create(self, iothub_registry_manager, mock_send):
        iothub_registry_manager.create_device_with_certificate_authority(fake_device_id)

        body = sent_body(mock_send)
        assert body["authentication"] == {"type": "certificateAuthority"}


@pytest.mark.describe("IoTHubRegistryManager - .delete_device()")
class TestDeleteDevice(object):
    @pytest.mark.it("DELETEs any version of the device when no etag is given")
    def test_delete(self, iothub_registry_manager, mock_send, response_factory):
        mock_send.return_value = response_factory(204)

        assert iothub_registry_manager.delete_device(fake_device_id) is None

        request = sent_request(mock_send)
        assert request.method == "DELETE"
        assert request.url == fake_device_url
        assert request.headers["If-Match"] == '"*"'

    @pytest.mark.parametrize(
        "etag",
        [
            pytest.param(fake_etag, id="unquoted etag"),
            pytest.param('"' + fake_etag + '"', id="quoted etag"),
        ],
    )
    @pytest.mark.it("Sends the given etag, quoted, as If-Match")
    def test_delete_with_etag(self, iothub_registry_manager, mock_send, response_factory, etag):
        mock_send.return_value = response_factory(204)

        iothub_registry_manager.delete_device(fake_device_id, etag)

        assert sent_request(mock_send).headers["If-Match"] == '"' + fake_etag + '"'

    @pytest.mark.it("Raises an HttpOperationError for an unknown device")
    def test_not_found(self, iothub_registry_manager, mock_send, response_factory):
        mock_send.return_value = response_factory(404, {"Message": "DeviceNotFound"})

        with pytest.raises(HttpOperationError) as e_info:
            iothub_registry_manager.delete_device(fake_device_id)
        assert e_info.value.response.status_code == 404


@pytest.mark.describe("IoTHubRegistryManager - .get_twin()")
class TestGetTwin(object):
    @pytest.mark.it("GETs the twin and deserializes it")
    def test_get_twin(self, iothub_registry_manager, mock_send, response_factory):
        mock_send.return_value = response_factory(200, fake_twin_body)

        twin = iothub_registry_manager.get_twin(fake_device_id)

        request = sent_request(mock_send)
        assert request.method == "GET"
        assert request.url == fake_twin_url
        assert twin.device_id == fake_device_id
        assert twin.etag == fake_etag
        assert twin.version == 3
        assert twin.connection_state == "Connected"
        assert twin.last_activity_time.replace(tzinfo=None) == datetime.datetime(
            2024, 1, 2, 3, 4, 5
        )
        assert twin.properties.desired == {"customKey": "customValue"}


@pytest.mark.describe("IoTHubRegistryManager - .update_twin()")
class TestUpdateTwin(object):
    @pytest.mark.it("PATCHes the desired properties guarded by the quoted etag")
    def test_update_twin(self, iothub_registry_manager, mock_send, response_factory):
        mock_send.return_value = response_factory(200, fake_twin_body)
        twin_patch = Twin(properties=TwinProperties(desired={"customKey": "customValue"}))

        twin = iothub_registry_manager.update_twin(fake_device_id, twin_patch, fake_etag)

        request = sent_request(mock_send)
        assert request.method == "PATCH"
        assert request.url == fake_twin_url
        assert request.headers["If-Match"] == '"' + fake_etag + '"'
        assert json.loads(request.data) == {"properties": {"desired": {"customKey": "customValue"}}}
        assert twin.etag == fake_etag

    @pytest.mark.it("Raises an HttpOperationError when the etag is stale")
    def test_stale_etag(self, iothub_registry_manager, mock_send, response_factory):
        mock_send.return_value = response_factory(412, {"Message": "PreconditionFailed"})
        twin_patch = Twin(properties=TwinProperties(desired={"customKey": "customValue"}))

        with pytest.raises(HttpOperationError) as e_info:
            iothub_registry_manager.update_twin(fake_device_id, twin_patch, fake_etag)
        assert e_info.value.response.status_code == 412


@pytest.mark.describe("IoTHubRegistryManager - .query_iot_hub()")
class TestQueryIoTHub(object):
    @pytest.mark.it("POSTs the query and returns the twins of the first page")
    def test_query_iot_hub(self, iothub_registry_manager, mock_send, response_factory):
        mock_send.return_value = response_factory(
            200,
            [fake_twin_body, dict(fake_twin_body, deviceId="Remembrall")],
            {"x-ms-item-type": "twin", "x-ms-continuation": fake_continuation_token},
        )

        query_result = iothub_registry_manager.query_iot_hub(
            QuerySpecification(query="select * from devices")
        )

        request = sent_request(mock_send)
        assert request.method == "POST"
        assert request.url == fake_query_url
        assert json.loads(request.data) == {"query": "select * from devices"}
        assert "x-ms-continuation" not in request.headers
        assert "x-ms-max-item-count" not in request.headers
        assert query_result.type == "twin"
        assert query_result.continuation_token == fake_continuation_token
        assert [twin.device_id for twin in query_result.items] == [fake_device_id, "Remembrall"]

    @pytest.mark.it("Sends the continuation token and max item count as headers")
    def test_query_iot_hub_with_paging(self, iothub_registry_manager, mock_send, response_factory):
        mock_send.return_value = response_factory(200, [], {"x-ms-item-type": "twin"})

        query_result = iothub_registry_manager.query_iot_hub(
            QuerySpecification(query="select * from devices"), fake_continuation_token, 42
        )

        request = sent_request(mock_send)
        assert request.headers["x-ms-continuation"] == fake_continuation_token
        assert request.headers["x-ms-max-item-count"] == "42"
        assert query_result.continuation_token is None
        assert query_result.items == []
