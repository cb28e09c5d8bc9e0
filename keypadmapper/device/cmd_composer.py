from enum import Enum

from keypadmapper.util.math_util import split_uint16_le

REPORT_ID = 0x03


class Cmd(Enum):
    READ_KEY_MAP = 0xFA
    READ_INFO = 0xFB
    WRITE_KEY_MAP = 0xFD
    WRITE_CONFIG = 0xFE


PACKET_READ_KEYPAD_INFO = bytes([REPORT_ID, Cmd.READ_INFO.value, 0xFB, 0xFB])

# has to follow every WRITE_CONFIG packet, otherwise the keypad does not apply the change
PACKET_END = bytes([REPORT_ID, 0xFD, 0xFE, 0xFF])


def compose_cmd(cmd, *extra):
    byte_stream = bytearray([REPORT_ID, cmd.value])
    byte_stream.extend(extra)
    return byte_stream


def pack_read_keypad_key_maps(keys, knobs, layer_id):
    return compose_cmd(Cmd.READ_KEY_MAP, keys, knobs, layer_id)


def pack_write_keypad_key_map_param(key_id, layer_id, data):
    return compose_cmd(Cmd.WRITE_KEY_MAP, key_id, layer_id, *data)


def pack_write_keypad_led_param(layer_id, led_mode_id, led_color_id):
    #           0  1  2  3  4  5  6  7  8  9  A  B  C
    # 0 RED    03 fe b0 01 08 00 00 00 00 00 01 00 10 : 03 fd fe ff
    # 3 ORANGE 03 fe b0 01 08 00 00 00 00 00 01 00 23 : 03 fd fe ff
    # 0x0A      layer ID
    # 0x0C-high LED color ID
    # 0x0C-low  LED mode ID
    led_id = led_color_id * 16 + led_mode_id
    return compose_cmd(Cmd.WRITE_CONFIG, 0xB0, 0x01, 0x08, 0x00, 0x00, 0x00, 0x00, 0x00, layer_id, 0x00, led_id)


def pack_write_keypad_delay_time_param(delay_time_ms):
    #           0  1  2  3  4  5  6  7  8  9  A  B  C
    # 0ms      03 fe b0 01 05 00 00 00 00 00 01 00 24
    # 10ms     03 fe b0 01 05 0a 00 00 00 00 01 00 24
    return compose_cmd(Cmd.WRITE_CONFIG, 0xB0, 0x01, 0x05, *split_uint16_le(delay_time_ms),
                       0x00, 0x00, 0x00, 0x01, 0x00, 0x24)
