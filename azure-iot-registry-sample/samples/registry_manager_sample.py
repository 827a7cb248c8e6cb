# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import os
from azure.iot.registry_sample import (
    IoTHubRegistryManager,
    RegistrySampleError,
    RegistryManagerSample,
    X509Thumbprints,
)

iothub_connection_str = os.getenv("IOTHUB_CONNECTION_STRING")
# Thumbprints are only needed for add_device_with_self_signed_certificate()
primary_thumbprint = os.getenv("IOTHUB_PFX_X509_THUMBPRINT")
secondary_thumbprint = os.getenv("IOTHUB_PFX_X509_THUMBPRINT2")

try:
    # Create IoTHubRegistryManager
    iothub_registry_manager = IoTHubRegistryManager.from_connection_string(iothub_connection_str)

    sample = RegistryManagerSample(
        iothub_registry_manager,
        iothub_connection_str,
        thumbprints=X509Thumbprints(primary_thumbprint, secondary_thumbprint),
    )

    # List the twins already in the hub
    sample.print_twins()

    # Add a device, send telemetry from it, and remove it again
    device_id = sample.run_sample()
    print("Sample ran with device {}".format(device_id))

except RegistrySampleError as ex:
    print("Registry error (status {0}): {1}".format(ex.status_code, ex))
except Exception as ex:
    print("Unexpected error {0}".format(ex))
except KeyboardInterrupt:
    print("{} stopped".format(__file__))
finally:
    print("{} finished".format(__file__))
