from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple, Union

from keypadmapper.device.device_settings import DEVICE_SETTINGS
from keypadmapper.device.errors import EncodingError, TransportError
from keypadmapper.device.types import KeyAction, ConsumerAction, MouseAction
from keypadmapper.util.math_util import split_uint16_le

#                  0  1  2  3  4  5  6  7  8  9  A  B  C  D  E  F
# key map report: 03 fa  k  l  t  ?  ?  ?  ?  ?  payload...
KEY_ID_OFFSET = 0x02
LAYER_ID_OFFSET = 0x03
TYPE_OFFSET = 0x04
PAYLOAD_OFFSET = 0x0A

# 5 unused bytes between the type and the payload
RESERVED_BYTES = 5


class KeyMapType(IntEnum):
    KEYS = 0x01
    CONSUMER = 0x02
    MOUSE = 0x03


@dataclass(frozen=True)
class KeyMapKeys:
    """A sequence of key presses"""
    keys: Tuple[KeyAction, ...]

    @property
    def type(self):
        return KeyMapType.KEYS


@dataclass(frozen=True)
class KeyMapConsumer:
    """A media / consumer control key"""
    consumer: ConsumerAction

    @property
    def type(self):
        return KeyMapType.CONSUMER


@dataclass(frozen=True)
class KeyMapMouse:
    mouse: MouseAction

    @property
    def type(self):
        return KeyMapType.MOUSE


@dataclass(frozen=True)
class KeyMapUnknown:
    """A key map of a type this codec does not understand, keeps the whole report"""
    type: int
    buffer: bytes


KeyMap = Union[KeyMapKeys, KeyMapConsumer, KeyMapMouse, KeyMapUnknown]


@dataclass(frozen=True)
class KeyMapWithId:
    layer_id: int
    key_id: int
    key_map: KeyMap


def create_key_map_keys(keys):
    return KeyMapKeys(tuple(keys))


def create_key_map_consumer(action):
    return KeyMapConsumer(action)


def create_key_map_mouse(action):
    return KeyMapMouse(action)


def is_key_map_keys(key_map):
    return key_map.type == KeyMapType.KEYS


def is_key_map_consumer(key_map):
    return key_map.type == KeyMapType.CONSUMER


def is_key_map_mouse(key_map):
    return key_map.type == KeyMapType.MOUSE


def pack_key_actions(keys):
    """[count, (modifier, key code) * count]"""
    count = len(keys)
    if count > DEVICE_SETTINGS.MAX_KEY_ACTIONS:
        raise EncodingError(f"Invalid size:{count}, at most {DEVICE_SETTINGS.MAX_KEY_ACTIONS} keys fit into a key map")

    data = bytearray([count])
    for key in keys:
        data.extend([key.mod_key, key.key_code])
    return data


def unpack_key_actions(buffer):
    #        0  1  2  3  4  5  6  7  8  9  A  B  C  D  E
    # Key-1 03 fa 0f 01-01-00 00 00 00 00:01:00 12
    # Key-2 03 fa 0f 01-01-00 00 00 00 00:02:00 12:00 13
    count = buffer[PAYLOAD_OFFSET]
    if count > DEVICE_SETTINGS.MAX_KEY_ACTIONS or PAYLOAD_OFFSET + 1 + 2 * count > len(buffer):
        raise TransportError(f"Invalid key action count: {count}")
    keys = []
    for i in range(count):
        offset = PAYLOAD_OFFSET + 1 + 2 * i
        keys.append(KeyAction(key_code=buffer[offset + 1], mod_key=buffer[offset]))
    return tuple(keys)


def pack_consumer_action(action):
    return bytearray([0x01, *split_uint16_le(action.id)])


def unpack_consumer_action(buffer):
    #          0  1  2  3  4  5  6  7  8  9  A  B  C
    # AL-Calc 03 fa 02 02-02-00 00 00 00 00:01:92 01
    if PAYLOAD_OFFSET + 3 > len(buffer):
        raise TransportError("Truncated consumer action")
    return ConsumerAction(int.from_bytes(buffer[PAYLOAD_OFFSET + 1:PAYLOAD_OFFSET + 3], "little"))


def pack_mouse_action(action):
    # marker | modifier | buttons | x | y | wheel
    return bytearray([0x04, action.mod_key, action.button, action.x, action.y, action.wheel])


def unpack_mouse_action(buffer):
    #        0  1  2  3  4  5  6  7  8  9  A  B  C  D  E  F
    # L-BTN 03 fa 01 02 03 00 00 00 00 00:04:00 01:00 00 00
    #   WH- 03 fa 05 02 03 00 00 00 00 00:04:00.00:00 00 ff
    # C-WH+ 03 fa 06 02 03 00 00 00 00 00:04:01.00:00 00 01
    if PAYLOAD_OFFSET + 6 > len(buffer):
        raise TransportError("Truncated mouse action")
    mod_key, button, x, y, wheel = buffer[PAYLOAD_OFFSET + 1:PAYLOAD_OFFSET + 6]
    return MouseAction(mod_key=mod_key, button=button, x=x, y=y, wheel=wheel)


def pack_key_map(key_map):
    """
    Encode a key map as it is written to the keypad (everything after key and layer ID).

    :raises EncodingError: for key maps of an unsupported type
    """
    if isinstance(key_map, KeyMapKeys):
        data = pack_key_actions(key_map.keys)
    elif isinstance(key_map, KeyMapConsumer):
        data = pack_consumer_action(key_map.consumer)
    elif isinstance(key_map, KeyMapMouse):
        data = pack_mouse_action(key_map.mouse)
    else:
        raise EncodingError(f"Unsupported KeyMap type: {getattr(key_map, 'type', key_map)}.")

    return bytearray([key_map.type, *bytes(RESERVED_BYTES)]) + data


def unpack_key_map_with_id(buffer):
    """Decode a key map report, unknown types are kept as KeyMapUnknown

    :raises TransportError: for payloads that do not fit the report
    """
    key_id = buffer[KEY_ID_OFFSET]
    layer_id = buffer[LAYER_ID_OFFSET]
    key_map_type = buffer[TYPE_OFFSET]

    if key_map_type == KeyMapType.KEYS:
        key_map = KeyMapKeys(unpack_key_actions(buffer))
    elif key_map_type == KeyMapType.CONSUMER:
        key_map = KeyMapConsumer(unpack_consumer_action(buffer))
    elif key_map_type == KeyMapType.MOUSE:
        key_map = KeyMapMouse(unpack_mouse_action(buffer))
    else:
        key_map = KeyMapUnknown(key_map_type, bytes(buffer))

    return KeyMapWithId(layer_id=layer_id, key_id=key_id, key_map=key_map)
