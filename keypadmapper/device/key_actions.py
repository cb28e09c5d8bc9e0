import json
from typing import NamedTuple, Optional

from keypadmapper.device.types import KeyAction, MOD_SHIFT, shift, is_shift, create_key_action, \
    combine_mod_key_and_action_name, dump_action
from keypadmapper.util.dict_util import invert_dict


class KeyCodeDef(NamedTuple):
    """
    Names of one HID keyboard usage.

    key_names/shift_key_names are the action names without/with Shift (e.g. '1' and 'Excl'),
    char/shift_char the characters the key types without/with Shift (e.g. '1' and '!').
    """
    key_code: int
    key_names: tuple = ()
    shift_key_names: tuple = ()
    char: Optional[str] = None
    shift_char: Optional[str] = None


# starting at 0x1E: (char, shifted char, name, shifted name), None where there is none
_STANDARD_KEYS = [
    ("1", "!", "1", "Excl"),
    ("2", "@", "2", "At"),
    ("3", "#", "3", "Hash"),
    ("4", "$", "4", "Dol"),
    ("5", "%", "5", "Per"),
    ("6", "^", "6", "Caret"),
    ("7", "&", "7", "Amp"),
    ("8", "*", "8", "Aster"),
    ("9", "(", "9", "LPar"),
    ("0", ")", "0", "RPar"),
    ("\n", None, "Enter", None),
    (None, None, "Esc", None),
    (None, None, "BkSpc", None),
    ("\t", None, "Tab", None),
    (" ", None, "Space", None),
    ("-", "_", "Minus", None),
    ("=", "+", "Equal", None),
    ("[", "{", "LBra", "LCBra"),
    ("]", "}", "RBra", "RCBra"),
    ("\\", "|", "BkSla", "Pipe"),
    (None, None, None, None),  # Non-US Hash
    (";", ":", "Semi", "Colon"),
    ("'", '"', "Quote", "DQ"),
    ("`", "~", "Grave", "Tilde"),
    (",", "<", "Comma", "LT"),
    (".", ">", "Dot", "RT"),
    ("/", "?", "Slash", "Que"),
    (None, None, "Caps", None),
    *[(None, None, f"F{i}", None) for i in range(1, 13)],
    (None, None, "PrSc", None),
    (None, None, "ScLk", None),
    (None, None, "Pause", None),
    (None, None, "Ins", None),
    (None, None, "Home", None),
    (None, None, "PgUp", None),
    (None, None, "Del", None),
    (None, None, "End", None),
    (None, None, "PgDn", None),
    (None, None, "Right", None),
    (None, None, "Left", None),
    (None, None, "Down", None),
    (None, None, "Up", None),
    (None, None, "NumLk", None),
    (None, None, "PadSlash", None),
    (None, None, "PadAster", None),
    (None, None, "PadMinus", None),
    (None, None, "PadPlus", None),
    (None, None, "PadEnter", None),
    (None, None, "Pad1", "PadEnd"),
    (None, None, "Pad2", "PadDown"),
    (None, None, "Pad3", "PadPgDn"),
    (None, None, "Pad4", "PadLeft"),
    (None, None, "Pad5", None),
    (None, None, "Pad6", "PadRight"),
    (None, None, "Pad7", "PadHome"),
    (None, None, "Pad8", "PadUp"),
    (None, None, "Pad9", "PadPgUp"),
    (None, None, "Pad0", "PadIns"),
    (None, None, "PadDot", "PadDel"),
    (None, None, None, None),  # Non-US Backslash
    (None, None, "App", None),
    (None, None, "Power", None),
    (None, None, "PadEqual", None),
    *[(None, None, f"F{i}", None) for i in range(13, 25)],
]

_META_KEYS = ["LCtrl", "LShift", "LAlt", "LGui", "RCtrl", "RShift", "RAlt", "RGui"]


def _names(name):
    return () if name is None else (name,)


def create_key_code_defs():
    defs = [KeyCodeDef(0x00, key_names=("NULL",))]

    # letters: 'a' types a, Shift+'a' types A, the action is named 'A'
    for i in range(26):
        char = chr(ord("a") + i)
        defs.append(KeyCodeDef(0x04 + i, key_names=(char.upper(),), char=char, shift_char=char.upper()))

    for i, (char, shift_char, name, shift_name) in enumerate(_STANDARD_KEYS):
        defs.append(KeyCodeDef(0x1E + i, _names(name), _names(shift_name), char, shift_char))

    for i, name in enumerate(_META_KEYS):
        defs.append(KeyCodeDef(0xE0 + i, key_names=(name,)))
    return defs


def create_key_record(key_code_defs):
    """
    Build the name and character lookup tables.

    :return:
        - key_record (:py:class:`dict`) action name -> KeyAction
        - char_record (:py:class:`dict`) character -> KeyAction
    """
    key_record = {}
    char_record = {}
    for key_def in key_code_defs:
        key = create_key_action(key_def.key_code)
        shift_key = shift(key)
        if key_def.char:
            char_record[key_def.char] = key
        if key_def.shift_char:
            char_record[key_def.shift_char] = shift_key
        for name in key_def.key_names:
            key_record[name] = key
        for name in key_def.shift_key_names:
            key_record[name] = shift_key
    return key_record, char_record


KEYS, CHARACTERS = create_key_record(create_key_code_defs())
_KEY_NAMES = invert_dict(KEYS)
_CHARACTER_BY_ACTION = invert_dict(CHARACTERS)


def find_key_action(name) -> Optional[KeyAction]:
    return KEYS.get(name)


def find_key_action_name(key_action) -> Optional[str]:
    return _KEY_NAMES.get(key_action)


def format_key_action(key_action):
    """Human readable key action, e.g. 'Ctrl+A', 'Tilde' or the plain fields for unknown key codes"""
    if is_shift(key_action):
        name = find_key_action_name(shift(create_key_action(key_action.key_code)))
        if name:
            return combine_mod_key_and_action_name(key_action.mod_key & ~MOD_SHIFT, name)

    name = find_key_action_name(create_key_action(key_action.key_code))
    if name:
        return combine_mod_key_and_action_name(key_action.mod_key, name)

    return dump_action(key_action)


def to_character(key_action) -> Optional[str]:
    return _CHARACTER_BY_ACTION.get(key_action)


def from_character(c) -> Optional[KeyAction]:
    return CHARACTERS.get(c)


def to_string(key_actions) -> Optional[str]:
    """The text typed by the key actions, None if any of them is not a plain character"""
    chars = []
    for key_action in key_actions:
        c = to_character(key_action)
        if c is None:
            return None
        chars.append(c)
    return "".join(chars)


def format_key_actions(key_actions):
    text = to_string(key_actions)
    if text is not None:
        return json.dumps(text)
    return " ".join(format_key_action(k) for k in key_actions)
