import logging

from keypadmapper.device.device_settings import DEVICE_SETTINGS
from keypadmapper.device.errors import EncodingError, TransportError
from keypadmapper.util.hex_util import to_hex_str

REQUEST_SIZE = DEVICE_SETTINGS.REQUEST_SIZE


def pad_request(request):
    """Zero pad a request to the fixed report size"""
    if len(request) > REQUEST_SIZE:
        raise EncodingError(f"Request of {len(request)} bytes exceeds the report size of {REQUEST_SIZE} bytes")
    return bytes(request) + bytes(REQUEST_SIZE - len(request))


def send_request(hid_io, request, log=None):
    """ Write a request report without reading the response"""
    (log or logging.getLogger('KeypadMapper')).debug("send:%s", to_hex_str(request))
    return hid_io.write(pad_request(request))


def recv_response(hid_io, timeout=DEVICE_SETTINGS.READ_TIMEOUT_MS, log=None):
    """
    Read one response report.

    :raises TransportError: if the keypad did not answer within the timeout
    """
    buffer = hid_io.read(timeout)
    if len(buffer) == 0:
        raise TransportError("No response received.")
    (log or logging.getLogger('KeypadMapper')).debug("recv:%s", to_hex_str(buffer, strip_zeros=True))
    return bytes(buffer)
