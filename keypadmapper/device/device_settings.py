class DeviceSettings:
    """All settings that are defined by the keypad, not by software"""
    _vid = 0x1189
    _pid = 0x8840

    _hid_usage_page = 0xFF00
    _hid_usage = 0x01

    # 1 byte report ID (0x03) + 64 bytes payload
    _request_size_in_bytes = 65
    _read_timeout_ms = 250

    _max_key_actions_per_key_map = 18
    _default_layers = 3

    # every knob is exposed as Left, Click and Right
    _keys_per_knob = 3

    @property
    def VID(self):
        """Vendor ID"""
        return self._vid

    @property
    def PID(self):
        """Product ID"""
        return self._pid

    @property
    def HID_USAGE_PAGE(self):
        return self._hid_usage_page

    @property
    def HID_USAGE(self):
        return self._hid_usage

    @property
    def REQUEST_SIZE(self):
        return self._request_size_in_bytes

    @property
    def READ_TIMEOUT_MS(self):
        return self._read_timeout_ms

    @property
    def MAX_KEY_ACTIONS(self):
        return self._max_key_actions_per_key_map

    @property
    def DEFAULT_LAYERS(self):
        return self._default_layers

    @property
    def KEYS_PER_KNOB(self):
        return self._keys_per_knob


DEVICE_SETTINGS = DeviceSettings()
