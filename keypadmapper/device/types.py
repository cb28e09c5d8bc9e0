import json
from dataclasses import dataclass, replace, asdict
from typing import NamedTuple, Optional

from keypadmapper.device.device_settings import DEVICE_SETTINGS
from keypadmapper.util.dict_util import invert_dict, find_key_by_value
from keypadmapper.util.math_util import to_int8, from_int8

# Modifier key bit flags (standard HID modifier byte)
MOD_CTRL = 0x01
MOD_SHIFT = 0x02
MOD_ALT = 0x04  # option
MOD_GUI = 0x08  # command
MOD_RCTRL = 0x10
MOD_RSHIFT = 0x20
MOD_RALT = 0x40
MOD_RGUI = 0x80

MOD_KEYS = {
    "Ctrl": MOD_CTRL,
    "Shift": MOD_SHIFT,
    "Alt": MOD_ALT,
    "Gui": MOD_GUI,
    "RCtrl": MOD_RCTRL,
    "RShift": MOD_RSHIFT,
    "RAlt": MOD_RALT,
    "RGui": MOD_RGUI,
}

MOUSE_BUTTON_LEFT = 0x01
MOUSE_BUTTON_RIGHT = 0x02
MOUSE_BUTTON_MIDDLE = 0x04


@dataclass(frozen=True)
class KeyAction:
    key_code: int
    mod_key: int = 0


@dataclass(frozen=True)
class MouseAction:
    """x, y and wheel are relative moves, stored as the unsigned byte of a signed 8-bit value"""
    mod_key: int = 0
    button: int = 0
    x: int = 0
    y: int = 0
    wheel: int = 0


@dataclass(frozen=True)
class ConsumerAction:
    """
    A consumer control (media key) identified by its usage ID.

    See https://usb.org/sites/default/files/hut1_5.pdf#page=126
    """
    id: int


def dump_action(action):
    """Structured fallback for actions without a name"""
    return json.dumps(asdict(action), separators=(",", ":"))


# modifier keys

def apply_mod_key(action, mod_key):
    """Return a copy of any action with a mod_key field, with the given modifier bits set"""
    return replace(action, mod_key=action.mod_key | mod_key)


def get_mod_key_names(mod_key):
    return [name for name, code in MOD_KEYS.items() if code & mod_key]


def create_mod_key(names):
    """Combine modifier names into a bitmask, None if any of the names is unknown"""
    mod_key = 0
    for name in names:
        code = MOD_KEYS.get(name)
        if code is None:
            return None
        mod_key |= code
    return mod_key


def combine_mod_key_and_action_name(mod_key, action_name):
    """Joins modifier names and an action name, e.g. 'Ctrl+Shift+A'"""
    return "+".join(get_mod_key_names(mod_key) + [action_name])


def create_key_action(key_code, mod_key=0):
    return KeyAction(key_code, mod_key)


def shift(action): return apply_mod_key(action, MOD_SHIFT)
def ctrl(action): return apply_mod_key(action, MOD_CTRL)
def alt(action): return apply_mod_key(action, MOD_ALT)
def gui(action): return apply_mod_key(action, MOD_GUI)
def rshift(action): return apply_mod_key(action, MOD_RSHIFT)
def rctrl(action): return apply_mod_key(action, MOD_RCTRL)
def ralt(action): return apply_mod_key(action, MOD_RALT)
def rgui(action): return apply_mod_key(action, MOD_RGUI)


NO_ACTION = KeyAction(0, 0)


def is_shift(action):
    return bool(action.mod_key & MOD_SHIFT)


# mouse actions

def mouse_action(**fields):
    return MouseAction(**fields)


def wheel(n, mod_key=0):
    return MouseAction(mod_key=mod_key, wheel=to_int8(n))


def move(x, y):
    return MouseAction(x=to_int8(x), y=to_int8(y))


MOUSE = {
    "LButton": mouse_action(button=MOUSE_BUTTON_LEFT),
    "RButton": mouse_action(button=MOUSE_BUTTON_RIGHT),
    "MButton": mouse_action(button=MOUSE_BUTTON_MIDDLE),
    "MoveDown": move(0, 1),
    "MoveUp": move(0, -1),
    "MoveRight": move(1, 0),
    "MoveLeft": move(-1, 0),
    "WheelUp": wheel(1),
    "WheelDown": wheel(-1),
}
_MOUSE_NAMES = invert_dict(MOUSE)


def find_mouse_action(name) -> Optional[MouseAction]:
    return MOUSE.get(name)


def find_mouse_action_name(action) -> Optional[str]:
    return _MOUSE_NAMES.get(action)


def format_mouse_action_as_move(action):
    if action.mod_key or action.button or action.wheel:
        return None
    return f"Move({from_int8(action.x)},{from_int8(action.y)})"


def format_mouse_action_as_wheel(action):
    if action.mod_key or action.button or action.x or action.y:
        return None
    if action.wheel == 0:
        return None
    return f"Wheel({from_int8(action.wheel)})"


def format_mouse_action(action):
    """Human readable mouse action: a known name, Wheel(n), Move(x,y) or the plain fields"""
    plain = replace(action, mod_key=0)
    name = find_mouse_action_name(plain) \
        or format_mouse_action_as_wheel(plain) \
        or format_mouse_action_as_move(plain) \
        or dump_action(plain)
    return combine_mod_key_and_action_name(action.mod_key, name)


# consumer actions

def consumer(usage_id):
    return ConsumerAction(usage_id)


MEDIA = {
    "ScreenBrightnessUp": consumer(0x006F),
    "ScreenBrightnessDown": consumer(0x0070),
    "NextTrack": consumer(0x00B5),
    "PrevTrack": consumer(0x00B6),
    "Stop": consumer(0x00B7),
    "PlayPause": consumer(0x00CD),
    "Mute": consumer(0x00E2),
    "VolumeUp": consumer(0x00E9),
    "VolumeDown": consumer(0x00EA),
    "BassUp": consumer(0x0152),
    "BassDown": consumer(0x0153),
    "TrebleUp": consumer(0x0154),
    "TrebleDown": consumer(0x0155),
    "Multimedia": consumer(0x0183),
    "Email": consumer(0x018A),
    "Calculator": consumer(0x0192),
    "MyComputer": consumer(0x0194),
    "WWWHome": consumer(0x0223),
    "WWWPageBack": consumer(0x0224),
    "WWWPageForward": consumer(0x0225),
    "WWWPageRefresh": consumer(0x0227),
}
_MEDIA_NAMES = invert_dict(MEDIA)


def find_consumer_action(name) -> Optional[ConsumerAction]:
    return MEDIA.get(name)


def find_consumer_action_name(action) -> Optional[str]:
    return _MEDIA_NAMES.get(action)


def format_consumer_action(action):
    return find_consumer_action_name(action) or dump_action(action)


# keypad layout

@dataclass(frozen=True)
class KeypadInfo:
    keys: int = 0
    knobs: int = 0


KNOB_ACTIONS = {
    "Left": 0,
    "Click": 1,
    "Right": 2,
}


class KnobIdAndAction(NamedTuple):
    knob_id: int
    knob_action: str


def get_key_count(info):
    """Number of addressable key IDs, every knob occupies three of them"""
    return info.keys + DEVICE_SETTINGS.KEYS_PER_KNOB * info.knobs


def find_knob_action(name):
    return KNOB_ACTIONS.get(name)


def find_knob_action_name(action):
    return find_key_by_value(KNOB_ACTIONS, action)


def get_key_id_for_knob(info, knob_id, knob_action):
    """Knob IDs are 1-based and follow the plain keys as Left, Click, Right"""
    return 1 + info.keys + DEVICE_SETTINGS.KEYS_PER_KNOB * (knob_id - 1) + knob_action


def get_knob_by_key_id(info, key_id) -> Optional[KnobIdAndAction]:
    """Inverse of get_key_id_for_knob, None for plain keys"""
    if key_id <= info.keys:
        return None
    knob, action_index = divmod(key_id - 1 - info.keys, DEVICE_SETTINGS.KEYS_PER_KNOB)
    return KnobIdAndAction(knob + 1, find_knob_action_name(action_index))


# LED

LED_MODES = {
    "None": 0,
    "All": 1,
    "LtRb": 2,
    "RbLt": 3,
    "Single": 4,
    "White": 5,
}

LED_COLORS = {
    "Red": 1,
    "Orange": 2,
    "Yellow": 3,
    "Green": 4,
    "Cyan": 5,
    "Blue": 6,
    "Purple": 7,
}


def find_led_mode(name):
    return LED_MODES.get(name)


def find_led_color(name):
    return LED_COLORS.get(name)
