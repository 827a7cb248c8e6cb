""" Azure IoTHub Registry Sample Library

This library demonstrates the device identity and twin operations of an Azure IoTHub
registry, and hands a newly provisioned device to a device client.
"""

from .iothub_registry_manager import IoTHubRegistryManager
from .registry_manager_sample import RegistryManagerSample
from .message_sample import MessageSample
from .config import SampleConfig, TransportType, X509Thumbprints
from .connection_string import get_host_name, create_device_connection_string
from .exceptions import (
    RegistrySampleError,
    ConflictError,
    NotFoundError,
    TransportError,
    ParseError,
    CleanupError,
)

__all__ = [
    "IoTHubRegistryManager",
    "RegistryManagerSample",
    "MessageSample",
    "SampleConfig",
    "TransportType",
    "X509Thumbprints",
    "get_host_name",
    "create_device_connection_string",
    "RegistrySampleError",
    "ConflictError",
    "NotFoundError",
    "TransportError",
    "ParseError",
    "CleanupError",
]
