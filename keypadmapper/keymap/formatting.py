import json

from keypadmapper.device.key_actions import format_key_actions
from keypadmapper.device.key_map import is_key_map_keys, is_key_map_consumer, is_key_map_mouse
from keypadmapper.device.types import format_consumer_action, format_mouse_action, get_knob_by_key_id
from keypadmapper.util.hex_util import to_hex_str


def format_key_map(key_map):
    if is_key_map_keys(key_map):
        return f"key:{format_key_actions(key_map.keys)}"
    if is_key_map_consumer(key_map):
        return f"media:{format_consumer_action(key_map.consumer)}"
    if is_key_map_mouse(key_map):
        return f"mouse:{format_mouse_action(key_map.mouse)}"
    return json.dumps({"type": key_map.type, "buffer": to_hex_str(key_map.buffer, strip_zeros=True)})


def format_key_map_with_id(info, key_map_with_id):
    """One line per slot, knob slots are shown by knob ID and action instead of key ID"""
    knob = get_knob_by_key_id(info, key_map_with_id.key_id)
    text = format_key_map(key_map_with_id.key_map)
    if knob is None:
        return f"layer-id: {key_map_with_id.layer_id}, key-id: {key_map_with_id.key_id} = {text}"
    return (f"layer-id: {key_map_with_id.layer_id}, knob-id: {knob.knob_id}, "
            f"knob-action: {knob.knob_action} = {text}")
