import logging
import os

import yaml
from platformdirs import user_config_dir

from keypadmapper.keymap.snapshot import DEFAULT_SNAPSHOT_FILE


class KeypadSettings:
    """ Stores program specific settings, used where neither an option nor an environment variable is given """
    APP_NAME = "KeypadMapper"
    CONFIG_FILENAME = "settings.yaml"

    def __init__(self, directory=None):
        self.collection = None
        self.log = logging.getLogger('KeypadMapper')

        directory = directory or user_config_dir(self.APP_NAME)
        self.path = os.path.join(directory, self.CONFIG_FILENAME)
        os.makedirs(directory, exist_ok=True)

        # None means: ask the keypad or use the built-in default
        self.defaults = {
            "path": None,
            "layers": None,
            "keys": None,
            "knobs": None,
            "snapshot_file": DEFAULT_SNAPSHOT_FILE,
        }

        if os.path.exists(self.path):
            self.load()
        else:
            self.collection = dict(self.defaults)
            self.save()

        self.log.debug("Current settings:\n%s", yaml.dump(self.collection, default_flow_style=False))

    def get(self, name):
        return self.collection[name]

    def get_all(self):
        return self.collection

    def set(self, name, value):
        if name not in self.defaults:
            raise KeyError(name)
        self.collection[name] = value
        self.save()

    def load(self):
        with open(self.path, encoding='utf-8') as f:
            self.collection = yaml.safe_load(f) or {}
        for key, value in self.defaults.items():
            self.collection.setdefault(key, value)

        self.collection = {k: v for k, v in self.collection.items() if k in self.defaults}

    def restore_defaults(self):
        self.collection = dict(self.defaults)
        self.save()

    def save(self):
        with open(self.path, "w", encoding='utf-8') as f:
            yaml.safe_dump(self.collection, f)
        self.log.debug("Saved settings to %s", self.path)
