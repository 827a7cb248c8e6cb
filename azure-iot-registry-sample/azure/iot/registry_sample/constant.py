# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module defines constants for use across the azure-iot-registry-sample package
"""

VERSION = "1.0.0"
USER_AGENT = "azure-iot-registry-sample-py/" + VERSION
IOTHUB_API_VERSION = "2021-04-12"

DEVICE_ID_PREFIX = "RegistryManagerSample_Device"
DEVICES_QUERY = "select * from devices"
CUSTOM_DESIRED_PROPERTIES = {"customKey": "customValue"}

DEFAULT_DEVICE_STATUS = "enabled"
DEFAULT_MESSAGE_COUNT = 5
