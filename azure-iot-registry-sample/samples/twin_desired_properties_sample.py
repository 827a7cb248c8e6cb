# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import os
import uuid
from azure.iot.registry_sample import (
    ConflictError,
    IoTHubRegistryManager,
    RegistryManagerSample,
)

iothub_connection_str = os.getenv("IOTHUB_CONNECTION_STRING")
device_id = "TwinSample_Device" + str(uuid.uuid4())

iothub_registry_manager = IoTHubRegistryManager.from_connection_string(iothub_connection_str)
sample = RegistryManagerSample(iothub_registry_manager, iothub_connection_str)

with sample.provisioned_device(device_id):
    # Read the twin once and use its etag for two updates in a row
    twin = sample.get_twin(device_id)
    updated_twin = sample.update_desired_properties(device_id, twin=twin)
    print("desired properties = {0}".format(updated_twin.properties.desired))

    try:
        sample.update_desired_properties(device_id, twin=twin, desired={"customKey": "stale"})
    except ConflictError as ex:
        print("Second update rejected as expected: {0}".format(ex))
    else:
        print("Second update was accepted, expected a ConflictError for the stale etag")
