# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module defines the msrest models exchanged with the IoTHub device registry.

Only the fields the registry sample reads or writes are modelled; anything
else returned by the service is ignored on deserialization.
"""

from enum import Enum
from msrest.serialization import Model


class AuthenticationType(str, Enum):

    SAS = "sas"
    SELF_SIGNED = "selfSigned"
    CERTIFICATE_AUTHORITY = "certificateAuthority"
    NONE = "none"


class SymmetricKey(Model):
    """SymmetricKey.

    :param primary_key: Base64 encoded primary key of the device. Left empty,
     the service generates one.
    :type primary_key: str
    :param secondary_key: Base64 encoded secondary key of the device.
    :type secondary_key: str
    """

    _attribute_map = {
        "primary_key": {"key": "primaryKey", "type": "str"},
        "secondary_key": {"key": "secondaryKey", "type": "str"},
    }

    def __init__(self, **kwargs):
        super(SymmetricKey, self).__init__(**kwargs)
        self.primary_key = kwargs.get("primary_key", None)
        self.secondary_key = kwargs.get("secondary_key", None)


class X509Thumbprint(Model):
    """X509Thumbprint.

    :param primary_thumbprint: X509 client certificate primary thumbprint.
    :type primary_thumbprint: str
    :param secondary_thumbprint: X509 client certificate secondary thumbprint.
    :type secondary_thumbprint: str
    """

    _attribute_map = {
        "primary_thumbprint": {"key": "primaryThumbprint", "type": "str"},
        "secondary_thumbprint": {"key": "secondaryThumbprint", "type": "str"},
    }

    def __init__(self, **kwargs):
        super(X509Thumbprint, self).__init__(**kwargs)
        self.primary_thumbprint = kwargs.get("primary_thumbprint", None)
        self.secondary_thumbprint = kwargs.get("secondary_thumbprint", None)


class AuthenticationMechanism(Model):
    """AuthenticationMechanism.

    :param symmetric_key: Used when type is 'sas'.
    :type symmetric_key: ~models.SymmetricKey
    :param x509_thumbprint: Used when type is 'selfSigned'.
    :type x509_thumbprint: ~models.X509Thumbprint
    :param type: The type of authentication used to connect to the service.
     Possible values include: 'sas', 'selfSigned', 'certificateAuthority', 'none'
    :type type: str or ~models.AuthenticationType
    """

    _attribute_map = {
        "symmetric_key": {"key": "symmetricKey", "type": "SymmetricKey"},
        "x509_thumbprint": {"key": "x509Thumbprint", "type": "X509Thumbprint"},
        "type": {"key": "type", "type": "str"},
    }

    def __init__(self, **kwargs):
        super(AuthenticationMechanism, self).__init__(**kwargs)
        self.symmetric_key = kwargs.get("symmetric_key", None)
        self.x509_thumbprint = kwargs.get("x509_thumbprint", None)
        self.type = kwargs.get("type", None)


class Device(Model):
    """A device identity in the IoTHub identity registry.

    :param device_id: The unique identifier of the device.
    :type device_id: str
    :param generation_id: The IoTHub generated, case-sensitive string used to
     distinguish devices with the same device_id that were deleted and re-created.
    :type generation_id: str
    :param etag: The string representing a weak ETag for the device identity.
    :type etag: str
    :param connection_state: Possible values include: 'Disconnected', 'Connected'
    :type connection_state: str
    :param status: Possible values include: 'enabled', 'disabled'
    :type status: str
    :param status_reason: The reason for the device identity status.
    :type status_reason: str
    :param connection_state_updated_time: The date and time the connection state was last updated.
    :type connection_state_updated_time: datetime
    :param last_activity_time: The date and last time the device last connected,
     received, or sent a message.
    :type last_activity_time: datetime
    :param cloud_to_device_message_count: The number of cloud-to-device messages
     currently queued for the device.
    :type cloud_to_device_message_count: int
    :param authentication: The authentication mechanism used by the device.
    :type authentication: ~models.AuthenticationMechanism
    """

    _attribute_map = {
        "device_id": {"key": "deviceId", "type": "str"},
        "generation_id": {"key": "generationId", "type": "str"},
        "etag": {"key": "etag", "type": "str"},
        "connection_state": {"key": "connectionState", "type": "str"},
        "status": {"key": "status", "type": "str"},
        "status_reason": {"key": "statusReason", "type": "str"},
        "connection_state_updated_time": {"key": "connectionStateUpdatedTime", "type": "iso-8601"},
        "last_activity_time": {"key": "lastActivityTime", "type": "iso-8601"},
        "cloud_to_device_message_count": {"key": "cloudToDeviceMessageCount", "type": "int"},
        "authentication": {"key": "authentication", "type": "AuthenticationMechanism"},
    }

    def __init__(self, **kwargs):
        super(Device, self).__init__(**kwargs)
        self.device_id = kwargs.get("device_id", None)
        self.generation_id = kwargs.get("generation_id", None)
        self.etag = kwargs.get("etag", None)
        self.connection_state = kwargs.get("connection_state", None)
        self.status = kwargs.get("status", None)
        self.status_reason = kwargs.get("status_reason", None)
        self.connection_state_updated_time = kwargs.get("connection_state_updated_time", None)
        self.last_activity_time = kwargs.get("last_activity_time", None)
        self.cloud_to_device_message_count = kwargs.get("cloud_to_device_message_count", None)
        self.authentication = kwargs.get("authentication", None)


class TwinProperties(Model):
    """The desired and reported properties of the twin.

    :param desired: The desired properties.
    :type desired: dict[str, object]
    :param reported: The reported properties.
    :type reported: dict[str, object]
    """

    _attribute_map = {
        "desired": {"key": "desired", "type": "{object}"},
        "reported": {"key": "reported", "type": "{object}"},
    }

    def __init__(self, **kwargs):
        super(TwinProperties, self).__init__(**kwargs)
        self.desired = kwargs.get("desired", None)
        self.reported = kwargs.get("reported", None)


class Twin(Model):
    """The state information for a device, as stored in the cloud.

    :param device_id: The unique identifier of the device in the identity registry.
    :type device_id: str
    :param etag: The string representing a ETag for the twin, used for
     optimistic concurrency on updates.
    :type etag: str
    :param version: The version for the twin.
    :type version: long
    :param tags: The collection of key-value pairs read and written by the
     solution back end.
    :type tags: dict[str, object]
    :param properties: The desired and reported properties for the device.
    :type properties: ~models.TwinProperties
    :param status: Possible values include: 'enabled', 'disabled'
    :type status: str
    :param connection_state: Possible values include: 'Disconnected', 'Connected'
    :type connection_state: str
    :param last_activity_time: The date and time when the device last connected,
     received, or sent a message.
    :type last_activity_time: datetime
    :param authentication_type: Possible values include: 'sas', 'selfSigned',
     'certificateAuthority', 'none'
    :type authentication_type: str
    """

    _attribute_map = {
        "device_id": {"key": "deviceId", "type": "str"},
        "etag": {"key": "etag", "type": "str"},
        "version": {"key": "version", "type": "long"},
        "tags": {"key": "tags", "type": "{object}"},
        "properties": {"key": "properties", "type": "TwinProperties"},
        "status": {"key": "status", "type": "str"},
        "connection_state": {"key": "connectionState", "type": "str"},
        "last_activity_time": {"key": "lastActivityTime", "type": "iso-8601"},
        "authentication_type": {"key": "authenticationType", "type": "str"},
    }

    def __init__(self, **kwargs):
        super(Twin, self).__init__(**kwargs)
        self.device_id = kwargs.get("device_id", None)
        self.etag = kwargs.get("etag", None)
        self.version = kwargs.get("version", None)
        self.tags = kwargs.get("tags", None)
        self.properties = kwargs.get("properties", None)
        self.status = kwargs.get("status", None)
        self.connection_state = kwargs.get("connection_state", None)
        self.last_activity_time = kwargs.get("last_activity_time", None)
        self.authentication_type = kwargs.get("authentication_type", None)


class QuerySpecification(Model):
    """A Json query request.

    :param query: The query string, e.g. "select * from devices".
    :type query: str
    """

    _attribute_map = {
        "query": {"key": "query", "type": "str"},
    }

    def __init__(self, **kwargs):
        super(QuerySpecification, self).__init__(**kwargs)
        self.query = kwargs.get("query", None)


class QueryResult(Model):
    """One page of a query result.

    :param type: The query result type. Possible values include: 'unknown', 'twin',
     'deviceJob', 'jobResponse', 'raw'
    :type type: str
    :param items: The query result items, as a collection.
    :type items: list[~models.Twin]
    :param continuation_token: Request continuation token. None on the last page.
    :type continuation_token: str
    """

    _attribute_map = {
        "type": {"key": "type", "type": "str"},
        "items": {"key": "items", "type": "[Twin]"},
        "continuation_token": {"key": "continuationToken", "type": "str"},
    }

    def __init__(self, **kwargs):
        super(QueryResult, self).__init__(**kwargs)
        self.type = kwargs.get("type", None)
        self.items = kwargs.get("items", None)
        self.continuation_token = kwargs.get("continuation_token", None)
