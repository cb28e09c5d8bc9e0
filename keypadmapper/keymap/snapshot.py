import logging
from dataclasses import asdict

import yaml

from keypadmapper.device.key_map import KeyMapKeys, KeyMapConsumer, KeyMapMouse, KeyMapUnknown, KeyMapWithId
from keypadmapper.device.types import KeyAction, ConsumerAction, MouseAction, KeypadInfo
from keypadmapper.keymap.formatting import format_key_map
from keypadmapper.util.hex_util import to_hex_str, from_hex_str

log = logging.getLogger('KeypadMapper')

DEFAULT_SNAPSHOT_FILE = "keypad.yaml"


def dump_key_map(key_map):
    """Plain data for a key map, 'text' is informational and ignored when loading"""
    if isinstance(key_map, KeyMapKeys):
        data = {"type": "keys", "keys": [asdict(k) for k in key_map.keys]}
    elif isinstance(key_map, KeyMapConsumer):
        data = {"type": "consumer", "consumer": asdict(key_map.consumer)}
    elif isinstance(key_map, KeyMapMouse):
        data = {"type": "mouse", "mouse": asdict(key_map.mouse)}
    else:
        data = {"type": int(key_map.type), "buffer": to_hex_str(key_map.buffer)}
    data["text"] = format_key_map(key_map)
    return data


def load_key_map(data):
    kind = data["type"]
    if kind == "keys":
        return KeyMapKeys(tuple(KeyAction(**k) for k in data["keys"]))
    if kind == "consumer":
        return KeyMapConsumer(ConsumerAction(**data["consumer"]))
    if kind == "mouse":
        return KeyMapMouse(MouseAction(**data["mouse"]))
    return KeyMapUnknown(int(kind), from_hex_str(data["buffer"]))


def create_snapshot(keypad, key_map_table):
    device = keypad.device
    return {
        "device": {
            "path": device.path_str,
            "vendor_id": device.vendor_id,
            "product_id": device.product_id,
            "product": device.product,
            "manufacturer": device.manufacturer,
        },
        "info": asdict(keypad.info),
        "layers": keypad.layers,
        "key_map_table": [
            [{"layer_id": k.layer_id, "key_id": k.key_id, **dump_key_map(k.key_map)} for k in key_maps]
            for key_maps in key_map_table
        ],
    }


def save_snapshot(path, snapshot):
    with open(path, "w", encoding='utf-8') as f:
        yaml.safe_dump(snapshot, f, sort_keys=False)
    log.info("Saved snapshot to %s", path)


def load_snapshot(path):
    """
    Read a snapshot written by save_snapshot.

    :return:
        - info (:py:class:`KeypadInfo`)
        - layers (:py:class:`int`)
        - key_map_table (:py:class:`list`) one list of KeyMapWithId per layer
    """
    with open(path, encoding='utf-8') as f:
        snapshot = yaml.safe_load(f) or {}

    info = KeypadInfo(**snapshot.get("info", {}))
    key_map_table = [
        [KeyMapWithId(layer_id=k["layer_id"], key_id=k["key_id"], key_map=load_key_map(k)) for k in key_maps]
        for key_maps in snapshot.get("key_map_table", [])
    ]
    return info, snapshot.get("layers", len(key_map_table)), key_map_table
