import re
from typing import Optional, Sequence, Union

from keypadmapper.device.key_actions import find_key_action, from_character
from keypadmapper.device.key_map import KeyMapKeys, KeyMapConsumer, KeyMapMouse, KeyMapUnknown, KeyMapWithId, \
    create_key_map_keys, create_key_map_consumer, create_key_map_mouse
from keypadmapper.device.types import KeyAction, ConsumerAction, MouseAction, KeypadInfo, apply_mod_key, \
    create_mod_key, find_mouse_action, find_consumer_action, get_key_count, find_knob_action, get_key_id_for_knob, \
    find_led_mode, find_led_color
from keypadmapper.device.keypad import WriteKeypadLedParam

ActionDef = Union[str, KeyAction, Sequence[KeyAction], ConsumerAction, MouseAction,
                  KeyMapKeys, KeyMapConsumer, KeyMapMouse]
_KEY_MAP_TYPES = (KeyMapKeys, KeyMapConsumer, KeyMapMouse, KeyMapUnknown)


class ConfigurationError(Exception):
    """An invalid value given by the user, reported with the command usage"""

    def __init__(self, message, lines=()):
        super().__init__(message)
        self.message = message
        self.lines = list(lines)


def create_key_actions_from_text(text):
    """Key actions typing the text, e.g. 'Hi' -> [Shift+H, I]"""
    key_actions = []
    for i, c in enumerate(text):
        key_action = from_character(c)
        if key_action is None:
            raise ConfigurationError(
                f"cannot convert character '{c}' at index {i} into a valid KeyAction. Full text: {text}")
        key_actions.append(key_action)
    return key_actions


def create_key_map_from_action_def(action_def):
    if isinstance(action_def, str):
        return create_key_map_keys(create_key_actions_from_text(action_def))
    if isinstance(action_def, (list, tuple)):
        return create_key_map_keys(action_def)
    if isinstance(action_def, KeyAction):
        return create_key_map_keys([action_def])
    if isinstance(action_def, ConsumerAction):
        return create_key_map_consumer(action_def)
    if isinstance(action_def, MouseAction):
        return create_key_map_mouse(action_def)
    if isinstance(action_def, _KEY_MAP_TYPES):
        return action_def
    raise ConfigurationError(f"cannot create a key map from: {action_def!r}")


def create_key_maps(action_def_table):
    """
    Flatten a table of action definitions, one row per layer, into KeyMapWithId values.

    Row and column positions give the 1-based layer and key IDs, None leaves a slot untouched.
    """
    key_maps = []
    for layer_index, action_defs in enumerate(action_def_table):
        for key_index, action_def in enumerate(action_defs):
            if action_def is None:
                continue
            key_maps.append(KeyMapWithId(layer_id=layer_index + 1, key_id=key_index + 1,
                                         key_map=create_key_map_from_action_def(action_def)))
    return key_maps


def parse_action_from_text(text):
    """
    Parse one action such as 'A', 'Ctrl+Shift+A', 'Ctrl+LButton' or 'Mute'.

    Modifiers are joined by '+' in front of the action name, media actions take no modifiers.
    """
    if len(text) == 0:
        raise ConfigurationError("cannot process the action string. The string cannot be empty")

    *mod_names, name = text.split("+")
    mod_key = create_mod_key(mod_names)
    if mod_key is None:
        raise ConfigurationError(f"cannot parse modifier keys from: '{text}'")

    key_action = find_key_action(name)
    if key_action is not None:
        return apply_mod_key(key_action, mod_key)

    mouse = find_mouse_action(name)
    if mouse is not None:
        return apply_mod_key(mouse, mod_key)

    consumer = find_consumer_action(name)
    if consumer is not None and mod_key == 0:
        return consumer

    raise ConfigurationError(f"cannot resolve the action: '{name}' is unknown")


def parse_key_map_from_key_text(text):
    """Space separated actions: any number of keys, or exactly one mouse or one media action"""
    key_actions = []
    consumer_actions = []
    mouse_actions = []

    for action_text in re.split(r"\s+", text):
        action = parse_action_from_text(action_text)
        if isinstance(action, KeyAction):
            key_actions.append(action)
        elif isinstance(action, ConsumerAction):
            consumer_actions.append(action)
        else:
            mouse_actions.append(action)

    if key_actions:
        if mouse_actions or consumer_actions:
            raise ConfigurationError("cannot set conflicting actions")
        return create_key_map_keys(key_actions)

    if consumer_actions:
        if mouse_actions:
            raise ConfigurationError("cannot set conflicting actions")
        if len(consumer_actions) > 1:
            raise ConfigurationError("cannot process the key map. Only one consumer action is allowed")
        return create_key_map_consumer(consumer_actions[0])

    if len(mouse_actions) > 1:
        raise ConfigurationError("cannot process the key map. Only one mouse action is allowed")
    return create_key_map_mouse(mouse_actions[0])


def create_key_map_from_text(text):
    """'@text' types the text literally, anything else is parsed as action names"""
    if text.startswith("@"):
        return create_key_map_keys(create_key_actions_from_text(text[1:]))
    return parse_key_map_from_key_text(text)


def parse_arg_int(flags, value):
    try:
        return int(value, 10)
    except (TypeError, ValueError):
        raise ConfigurationError(f"option '{flags}' argument '{value}' is invalid. It must be a valid integer")


def create_parse_arg_int(flags):
    def parse(value):
        return parse_arg_int(flags, value)
    return parse


def normalize_keypad_info(keys=None, knobs=None) -> Optional[KeypadInfo]:
    """KeypadInfo from the given counts, None if neither is given and the keypad has to be asked"""
    if keys is None and knobs is None:
        return None
    return KeypadInfo(keys=keys or 0, knobs=knobs or 0)


def resolve_key_id(info, key_id=None, knob_id=None, knob_action=None):
    """Key ID of a plain key or of a knob action, validated against the keypad layout"""
    if key_id is not None:
        key_count = get_key_count(info)
        if key_id <= 0 or key_id > key_count:
            raise ConfigurationError(f"invalid key ID: {key_id}. It must be between 1 and {key_count}")
        return key_id

    if knob_id is None or knob_action is None:
        raise ConfigurationError(
            "cannot resolve the key ID. Specify either '--key-id' or both '--knob-id' and '--knob-action'")
    action = find_knob_action(knob_action)
    if action is None:
        raise ConfigurationError(f"cannot process the knob action: '{knob_action}' is invalid")
    if knob_id <= 0 or knob_id > info.knobs:
        raise ConfigurationError(f"invalid knob ID: {knob_id}. It must be between 1 and {info.knobs}")
    return get_key_id_for_knob(info, knob_id, action)


def resolve_write_led_params(layer_id, led_mode, led_color):
    led_mode_id = find_led_mode(led_mode)
    if led_mode_id is None:
        raise ConfigurationError(f"invalid LED mode: '{led_mode}'")
    led_color_id = find_led_color(led_color)
    if led_color_id is None:
        raise ConfigurationError(f"invalid LED color: '{led_color}'")
    return WriteKeypadLedParam(layer_id, led_mode_id, led_color_id)


def validate_key_def_table(key_def_table, layers, key_count):
    if len(key_def_table) <= 0 or len(key_def_table) > layers:
        raise ConfigurationError(
            f"cannot process the key definition table. It must contain between 1 and {layers} layers. "
            f"Found: {len(key_def_table)}")

    for i, key_defs in enumerate(key_def_table):
        if len(key_defs) > key_count:
            raise ConfigurationError(
                f"cannot validate layer {i + 1}. The number of keys exceeds the maximum allowed ({key_count}). "
                f"Found: {len(key_defs)}")
