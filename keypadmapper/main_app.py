import argparse
import logging
import os
import sys

from keypadmapper._version import __version__
from keypadmapper.device.hid_helper import DEFAULT_KEYPAD_QUERY, KeypadQuery, find_keypad_devices, open_keypad
from keypadmapper.device.key_actions import KEYS
from keypadmapper.device.key_map import KeyMapUnknown, KeyMapWithId
from keypadmapper.device.types import KeypadInfo, MOD_KEYS, MOUSE, MEDIA, KNOB_ACTIONS, LED_MODES, LED_COLORS
from keypadmapper.keymap.action_def import ConfigurationError, create_key_map_from_text, create_key_maps, \
    create_parse_arg_int, normalize_keypad_info, parse_arg_int, resolve_key_id, resolve_write_led_params, \
    validate_key_def_table
from keypadmapper.keymap.formatting import format_key_map_with_id
from keypadmapper.keymap.snapshot import DEFAULT_SNAPSHOT_FILE, create_snapshot, save_snapshot, load_snapshot
from keypadmapper.settings import KeypadSettings

log = logging.getLogger('KeypadMapper')

LOG_FORMAT = "[%(asctime)s] {%(filename)s:%(lineno)d} %(levelname)s - %(message)s"

# option name -> environment variable, checked before the settings file
ENV_VARS = {
    "path": "KEYPAD_PATH",
    "layers": "KEYPAD_LAYERS",
    "keys": "KEYPAD_KEYS",
    "knobs": "KEYPAD_KNOBS",
}
_INT_OPTIONS = {
    "layers": "-L, --layers",
    "keys": "-K, --keys",
    "knobs": "-N, --knobs",
}


def setup_logging(debug=0, log_file=None):
    """--debug 1 shows the keypad traffic, 2 additionally everything the libraries log"""
    handlers = [logging.StreamHandler(stream=sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(filename=log_file, encoding="utf-8"))
    logging.basicConfig(
        level=logging.DEBUG if debug > 1 else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
    )
    log.setLevel(logging.DEBUG if debug > 0 else logging.INFO)


def common_options_parser():
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument('-P', '--path', help='Path to the keypad device [env: KEYPAD_PATH]')
    for name, flags in _INT_OPTIONS.items():
        short, long = flags.split(", ")
        parser.add_argument(short, long, type=create_parse_arg_int(f"{flags} <value>"),
                            help=f'Number of {name} [env: {ENV_VARS[name]}]')
    parser.add_argument('--debug', type=int, default=0, choices=[0, 1, 2],
                        help='Set debug level: 0 (no debug), 1 (keypad traffic), 2 (detailed debug)')
    parser.add_argument('--log-file', help='Additionally write the log to this file')
    return parser


def apply_option_defaults(options, settings, environ=None):
    """Fill options not given on the command line from the environment, then from the settings file"""
    environ = os.environ if environ is None else environ
    for name, env_var in ENV_VARS.items():
        if getattr(options, name, None) is not None:
            continue
        value = environ.get(env_var)
        if value:
            if name in _INT_OPTIONS:
                value = parse_arg_int(f"{_INT_OPTIONS[name]} <value>", value)
        else:
            value = settings.get(name) if settings else None
        setattr(options, name, value)
    return options


def help_map():
    return f"""
The <keys> can be specified in the following formats:
- A string starting with '@', e.g., '@HELLO!'.
- A format like 'A', 'Ctrl+A', several key actions separated by spaces.

For modifier keys such as:
  {', '.join(MOD_KEYS)}.

For key actions such as:
  {', '.join(KEYS)}.

For mouse actions such as:
  {', '.join(MOUSE)}.

For media actions such as:
  {', '.join(MEDIA)}.
"""


def help_led():
    return f"""
The <mode> can be specified using the following value:
  {', '.join(LED_MODES)}.

The <color> can be specified using the following value:
  {', '.join(LED_COLORS)}.
"""


def build_parser():
    """
    :return:
        - parser (:py:class:`argparse.ArgumentParser`)
        - commands (:py:class:`dict`) command name -> sub parser, used to print the matching usage
    """
    parser = argparse.ArgumentParser(
        prog='keypad-mapper',
        description='Define key, mouse and media mappings of a programmable USB keypad')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    subparsers = parser.add_subparsers(dest='command', required=True)
    common = common_options_parser()
    commands = {}

    init = subparsers.add_parser('init', parents=[common], help='reads and prints all key maps, saves a snapshot')
    init.add_argument('-o', '--output', help='Snapshot file, defaults to snapshot_file of the settings')
    init.set_defaults(run=run_init)
    commands['init'] = init

    restore = subparsers.add_parser('restore', parents=[common], help='writes the key maps of a snapshot')
    restore.add_argument('-i', '--input', help='Snapshot file, defaults to snapshot_file of the settings')
    restore.set_defaults(run=run_restore)
    commands['restore'] = restore

    key_map = subparsers.add_parser('map', parents=[common], help='sets a key mapping', epilog=help_map(),
                                    formatter_class=argparse.RawDescriptionHelpFormatter)
    key_map.add_argument('keys')
    key_map.add_argument('-l', '--layer-id', type=create_parse_arg_int('-l, --layer-id <value>'), default=1,
                         help='ID of the layer')
    key_map.add_argument('-k', '--key-id', type=create_parse_arg_int('-k, --key-id <value>'), help='ID of the key')
    key_map.add_argument('-n', '--knob-id', type=create_parse_arg_int('-n, --knob-id <value>'),
                         help='ID of the knob')
    key_map.add_argument('-a', '--knob-action', choices=list(KNOB_ACTIONS), help='Knob action')
    key_map.set_defaults(run=run_map)
    commands['map'] = key_map

    led = subparsers.add_parser('led', parents=[common], help='sets LED configuration', epilog=help_led(),
                                formatter_class=argparse.RawDescriptionHelpFormatter)
    led.add_argument('mode')
    led.add_argument('color')
    led.add_argument('-l', '--layer-id', type=create_parse_arg_int('-l, --layer-id <value>'), default=1,
                     help='ID of the layer')
    led.set_defaults(run=run_led)
    commands['led'] = led

    delay = subparsers.add_parser('delay', parents=[common], help='sets a delay time')
    delay.add_argument('time', help='Delay time in milliseconds')
    delay.set_defaults(run=run_delay)
    commands['delay'] = delay

    return parser, commands


def detect_keypad(path=None):
    """The single keypad matching the path, or the default query if there is none"""
    query = KeypadQuery(path=path) if path else DEFAULT_KEYPAD_QUERY
    devices = find_keypad_devices(query)
    if len(devices) == 0:
        raise ConfigurationError("cannot find the keypad device")
    if len(devices) > 1:
        raise ConfigurationError("cannot detect the keypad device. Use the '--path' option to specify its path",
                                 [d.path_str for d in devices])
    return devices[0]


def execute_keypad_task(options, task):
    """Open the keypad, apply layers and keypad info from the options and run task(keypad)"""
    device = detect_keypad(options.path)
    log.debug("Using keypad %s (%s)", device.path_str, device.product)

    with open_keypad(device, log) as keypad:
        if options.layers:
            keypad.set_layers(options.layers)

        info = normalize_keypad_info(options.keys, options.knobs)
        if info is not None:
            keypad.set_info(info)
        else:
            keypad.read_info()

        return task(keypad)


def run_init(options, settings):
    def task(keypad):
        key_map_table = keypad.read_key_map_table()
        for key_maps in key_map_table:
            for key_map_with_id in key_maps:
                print(format_key_map_with_id(keypad.info, key_map_with_id))
        path = options.output or (settings.get("snapshot_file") if settings else None) or DEFAULT_SNAPSHOT_FILE
        save_snapshot(path, create_snapshot(keypad, key_map_table))
        return key_map_table

    return execute_keypad_task(options, task)


def run_restore(options, settings):
    path = options.input or (settings.get("snapshot_file") if settings else None) or DEFAULT_SNAPSHOT_FILE
    if not os.path.exists(path):
        raise ConfigurationError(f"cannot find the snapshot file: {path}")
    _, layers, key_map_table = load_snapshot(path)
    if not options.layers:
        options.layers = layers

    def task(keypad):
        key_count = keypad.get_key_count()
        key_maps = []
        for snapshot_key_maps in key_map_table:
            for key_map_with_id in snapshot_key_maps:
                if isinstance(key_map_with_id.key_map, KeyMapUnknown):
                    log.warning("Skipping layer %d, key %d: key map type %d cannot be written",
                                key_map_with_id.layer_id, key_map_with_id.key_id, key_map_with_id.key_map.type)
                    continue
                if not 1 <= key_map_with_id.layer_id <= keypad.layers or not 1 <= key_map_with_id.key_id <= key_count:
                    raise ConfigurationError(
                        f"cannot restore layer {key_map_with_id.layer_id}, key {key_map_with_id.key_id}. "
                        f"The keypad has {keypad.layers} layers and {key_count} keys")
                key_maps.append(key_map_with_id)

        # nothing is written unless every slot fits
        for key_map_with_id in key_maps:
            keypad.write_key_map(key_map_with_id)
            print(format_key_map_with_id(keypad.info, key_map_with_id))
        return key_maps

    return execute_keypad_task(options, task)


def run_map(options, settings):
    # catch option and text errors before the keypad is opened
    resolve_key_id(KeypadInfo(0x100, 0x100), options.key_id, options.knob_id, options.knob_action)
    key_map = create_key_map_from_text(options.keys)

    def task(keypad):
        key_id = resolve_key_id(keypad.info, options.key_id, options.knob_id, options.knob_action)
        key_map_with_id = KeyMapWithId(layer_id=options.layer_id, key_id=key_id, key_map=key_map)
        keypad.write_key_map(key_map_with_id)
        print(format_key_map_with_id(keypad.info, key_map_with_id))
        return key_map_with_id

    return execute_keypad_task(options, task)


def run_led(options, settings):
    param = resolve_write_led_params(options.layer_id, options.mode, options.color)

    def task(keypad):
        keypad.write_led(param)
        log.info("Set LED of layer %d to mode %s, color %s", param.layer_id, options.mode, options.color)
        return param

    return execute_keypad_task(options, task)


def run_delay(options, settings):
    delay_time_ms = parse_arg_int("time", options.time)

    def task(keypad):
        keypad.write_delay_time(delay_time_ms)
        log.info("Set delay time to %d ms", delay_time_ms)
        return delay_time_ms

    return execute_keypad_task(options, task)


def find_command_parser(parser, commands, argv):
    for arg in argv:
        if arg in commands:
            return commands[arg]
    return parser


def report_error(e, parser):
    """Print a configuration error with the usage, log anything else. Returns the exit code"""
    if isinstance(e, ConfigurationError):
        print(f"error: {e.message}", file=sys.stderr)
        for line in e.lines:
            print(line, file=sys.stderr)
        print(file=sys.stderr)
        parser.print_help(file=sys.stderr)
    else:
        log.error("%s: %s", type(e).__name__, e)
        log.debug("Details:", exc_info=e)
    return 1


def run_command(argv=None, settings=None):
    """Parse the arguments and run the selected command, returns the exit code"""
    argv = sys.argv[1:] if argv is None else argv
    parser, commands = build_parser()
    try:
        options = parser.parse_args(argv)
        setup_logging(options.debug, options.log_file)
        if settings is None:
            settings = KeypadSettings()
        apply_option_defaults(options, settings)
        options.run(options, settings)
    except Exception as e:
        return report_error(e, find_command_parser(parser, commands, argv))
    return 0


def define_key_map(key_def_table, argv=None, settings=None):
    """
    Entry point for scripts defining a whole layout, e.g.

        define_key_map([["Hello", ctrl(KEYS["C"]), None, MEDIA["Mute"]]])

    One row per layer, one entry per key ID, None keeps a key. Mappings are only
    printed unless the script is called with --apply.
    """
    argv = sys.argv[1:] if argv is None else argv
    parser = argparse.ArgumentParser(parents=[common_options_parser()],
                                     description='Defines the key maps of the keypad')
    parser.add_argument('-A', '--apply', action='store_true', help='applies the specified key definition')

    def task(keypad):
        validate_key_def_table(key_def_table, keypad.layers, keypad.get_key_count())
        key_maps = create_key_maps(key_def_table)
        for key_map_with_id in key_maps:
            print(format_key_map_with_id(keypad.info, key_map_with_id))
            if options.apply:
                keypad.write_key_map(key_map_with_id)
        if not options.apply:
            print("Use '--apply' to proceed with applying the changes")
        return key_maps

    try:
        options = parser.parse_args(argv)
        setup_logging(options.debug, options.log_file)
        if settings is None:
            settings = KeypadSettings()
        apply_option_defaults(options, settings)
        execute_keypad_task(options, task)
    except Exception as e:
        return report_error(e, parser)
    return 0


def main():
    sys.exit(run_command())
