# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Define the user-facing exceptions raised by the registry sample, and the
translation of service client failures into them"""

import contextlib
import logging
from msrest.exceptions import ClientRequestError, HttpOperationError
from requests.exceptions import RequestException

logger = logging.getLogger(__name__)


class RegistrySampleError(Exception):
    """Base class for failures raised by the registry sample

    :ivar status_code: The HTTP status returned by IoTHub, if there was one
    """

    def __init__(self, message, status_code=None):
        super(RegistrySampleError, self).__init__(message)
        self.status_code = status_code


class ConflictError(RegistrySampleError):
    """
    Service returned 409 (device already exists) or 412 (stale etag)
    """

    pass


class NotFoundError(RegistrySampleError):
    """
    Service returned 404
    """

    pass


class TransportError(RegistrySampleError):
    """
    The request could not be sent, or the service failed to handle it
    """

    pass


class ParseError(RegistrySampleError):
    """
    A required value could not be parsed out of a connection string
    """

    pass


class CleanupError(RegistrySampleError):
    """
    Both an operation and the cleanup that followed it failed

    :ivar error: The exception raised by the operation
    :ivar cleanup_error: The exception raised by the cleanup
    """

    def __init__(self, message, error, cleanup_error):
        super(CleanupError, self).__init__(message)
        self.error = error
        self.cleanup_error = cleanup_error


_status_code_map = {
    404: NotFoundError,
    409: ConflictError,
    412: ConflictError,
}


def _get_status_code(error):
    response = getattr(error, "response", None)
    return getattr(response, "status_code", None)


def translate_error(error, operation):
    """Return the RegistrySampleError matching a service client failure

    :param Exception error: The exception raised by the service client
    :param str operation: Description of the failed operation, used in the message
    :rtype: RegistrySampleError
    """
    if isinstance(error, HttpOperationError):
        status_code = _get_status_code(error)
        error_class = _status_code_map.get(status_code, TransportError)
        message = "{} failed with status {}: {}".format(operation, status_code, error)
        return error_class(message, status_code=status_code)
    return TransportError("{} failed to reach IoTHub: {}".format(operation, error))


@contextlib.contextmanager
def handle_service_errors(operation):
    """Context manager re-raising service client failures as RegistrySampleErrors.

    The original exception is kept as the ``__cause__`` of the translated one.

    :param str operation: Description of the wrapped operation
    """
    try:
        yield
    except (HttpOperationError, ClientRequestError, RequestException) as e:
        translated = translate_error(e, operation)
        logger.warning(str(translated))
        raise translated from e
