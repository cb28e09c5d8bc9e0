import logging
from typing import NamedTuple

from keypadmapper.device.cmd_composer import PACKET_READ_KEYPAD_INFO, PACKET_END, pack_read_keypad_key_maps, \
    pack_write_keypad_key_map_param, pack_write_keypad_led_param, pack_write_keypad_delay_time_param
from keypadmapper.device.device_settings import DEVICE_SETTINGS
from keypadmapper.device.errors import TransportError
from keypadmapper.device.key_map import pack_key_map, unpack_key_map_with_id
from keypadmapper.device.transport import send_request, recv_response
from keypadmapper.device.types import KeypadInfo, get_key_count, get_knob_by_key_id
from keypadmapper.util.hex_util import to_hex_str


class WriteKeypadLedParam(NamedTuple):
    layer_id: int
    led_mode_id: int
    led_color_id: int


def read_keypad_info(hid_io, log=None):
    send_request(hid_io, PACKET_READ_KEYPAD_INFO, log)
    response = recv_response(hid_io, log=log)
    return KeypadInfo(keys=response[2], knobs=response[3])


def read_keypad_key_maps(hid_io, keys, knobs, layer_id, log=None):
    """
    Read all key maps of one layer: one request, then one response per key ID.

    :return: list of KeyMapWithId, index 0 holds key ID 1
    :raises TransportError: for responses of another layer or with an unexpected or repeated key ID
    """
    send_request(hid_io, pack_read_keypad_key_maps(keys, knobs, layer_id), log)

    count = get_key_count(KeypadInfo(keys, knobs))
    key_maps = [None] * count
    for _ in range(count):
        buffer = recv_response(hid_io, log=log)
        key_map_with_id = unpack_key_map_with_id(buffer)
        if key_map_with_id.layer_id != layer_id:
            raise TransportError(f"Invalid layer response: {to_hex_str(buffer, strip_zeros=True)}")
        if not 1 <= key_map_with_id.key_id <= count:
            raise TransportError(f"Invalid key response: {to_hex_str(buffer, strip_zeros=True)}")
        if key_maps[key_map_with_id.key_id - 1] is not None:
            raise TransportError(f"Duplicate key response: {to_hex_str(buffer, strip_zeros=True)}")
        key_maps[key_map_with_id.key_id - 1] = key_map_with_id
    return key_maps


def read_keypad_key_map_table(hid_io, info, layers, log=None):
    """Key maps of layers 1..layers, nothing is returned if one of the layers fails"""
    return [read_keypad_key_maps(hid_io, info.keys, info.knobs, layer_id, log)
            for layer_id in range(1, layers + 1)]


def write_keypad_key_map_raw(hid_io, key_id, layer_id, data, log=None):
    return send_request(hid_io, pack_write_keypad_key_map_param(key_id, layer_id, data), log)


def write_keypad_key_map(hid_io, key_map_with_id, log=None):
    return write_keypad_key_map_raw(hid_io, key_map_with_id.key_id, key_map_with_id.layer_id,
                                    pack_key_map(key_map_with_id.key_map), log)


def write_keypad_led(hid_io, param, log=None):
    send_request(hid_io, pack_write_keypad_led_param(param.layer_id, param.led_mode_id, param.led_color_id), log)
    send_request(hid_io, PACKET_END, log)


def write_keypad_delay_time(hid_io, delay_time_ms, log=None):
    send_request(hid_io, pack_write_keypad_delay_time_param(delay_time_ms), log)
    send_request(hid_io, PACKET_END, log)


class Keypad:
    """Sequential protocol exchanges with one opened keypad"""

    def __init__(self, device, hid_io, log=None):
        self.device = device
        self.hid_io = hid_io
        self.log = log or logging.getLogger('KeypadMapper')
        self.layers = DEVICE_SETTINGS.DEFAULT_LAYERS
        self.info = KeypadInfo()

    def set_layers(self, layers):
        self.layers = layers

    def set_info(self, info):
        self.info = KeypadInfo(info.keys, info.knobs)

    def get_key_count(self):
        return get_key_count(self.info)

    def get_knob_by_key_id(self, key_id):
        return get_knob_by_key_id(self.info, key_id)

    def read_info(self):
        self.set_info(read_keypad_info(self.hid_io, self.log))
        self.log.debug("Keypad has %d keys and %d knobs", self.info.keys, self.info.knobs)
        return self.info

    def read_key_map_table(self):
        return read_keypad_key_map_table(self.hid_io, self.info, self.layers, self.log)

    def write_key_map(self, key_map_with_id):
        return write_keypad_key_map(self.hid_io, key_map_with_id, self.log)

    def write_led(self, param):
        return write_keypad_led(self.hid_io, param, self.log)

    def write_delay_time(self, delay_time_ms):
        return write_keypad_delay_time(self.hid_io, delay_time_ms, self.log)
