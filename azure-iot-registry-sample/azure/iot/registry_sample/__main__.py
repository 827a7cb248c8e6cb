# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Run the registry manager sample against the IoTHub named by IOTHUB_CONNECTION_STRING"""

import argparse
import logging
import sys
from .config import SampleConfig, TransportType
from .exceptions import RegistrySampleError
from .iothub_registry_manager import IoTHubRegistryManager
from .message_sample import MessageSample
from .registry_manager_sample import RegistryManagerSample

logger = logging.getLogger(__name__)


def _parse_args(argv):
    parser = argparse.ArgumentParser(
        prog="python -m azure.iot.registry_sample",
        description="Add a device to an IoTHub, send messages from it, then remove it.",
    )
    parser.add_argument(
        "--enumerate-twins",
        action="store_true",
        help="list the twins of all devices before running the sample",
    )
    parser.add_argument(
        "--transport",
        choices=[t.value for t in TransportType],
        default=None,
        help="device transport (default: $IOTHUB_DEVICE_TRANSPORT or mqtt)",
    )
    parser.add_argument(
        "--message-count",
        type=int,
        default=None,
        help="number of messages sent by the device (default: $IOTHUB_MESSAGE_COUNT or 5)",
    )
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    return parser.parse_args(argv)


def create_sample(config, registry_manager=None):
    """Wire a RegistryManagerSample from a SampleConfig"""
    if registry_manager is None:
        registry_manager = IoTHubRegistryManager.from_connection_string(config.connection_string)

    def message_sample_factory(device_connection_string, transport):
        return MessageSample.from_connection_string(
            device_connection_string, transport, config.message_count
        )

    return RegistryManagerSample(
        registry_manager,
        config.connection_string,
        thumbprints=config.thumbprints,
        message_sample_factory=message_sample_factory,
        transport=config.transport,
    )


def main(argv=None, environ=None):
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.ERROR)

    try:
        config = SampleConfig.from_environment(
            environ,
            transport=args.transport,
            message_count=args.message_count,
            enumerate_twins=args.enumerate_twins,
        )
        sample = create_sample(config)
    except ValueError as e:
        print("Invalid configuration: {}".format(e))
        return 1

    try:
        if config.enumerate_twins:
            sample.print_twins()
        sample.run_sample()
    except RegistrySampleError as e:
        print("Registry sample failed: {}".format(e))
        return 1
    except KeyboardInterrupt:
        print("Registry sample stopped")
        return 1

    print("Registry sample finished")
    return 0


if __name__ == "__main__":
    sys.exit(main())
