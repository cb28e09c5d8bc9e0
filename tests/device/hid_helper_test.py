import sys
import unittest
from unittest.mock import MagicMock, patch

try:
    import hid  # noqa: F401
except ImportError:
    # no native hidapi library, every test replaces hid
    sys.modules["hid"] = MagicMock()

from keypadmapper.device import hid_helper

from keypadmapper.device.errors import TransportError
from keypadmapper.device.keypad import Keypad


def enumerate_item(path, usage_page=0xFF00, usage=0x01, vendor_id=0x1189, product_id=0x8840):
    return {
        "path": path,
        "vendor_id": vendor_id,
        "product_id": product_id,
        "usage_page": usage_page,
        "usage": usage,
        "interface_number": 1,
        "product_string": "Keypad",
        "manufacturer_string": None,
        "serial_number": "",
    }


class TestFindKeypadDevices(unittest.TestCase):

    @patch("keypadmapper.device.hid_helper.hid")
    def test_default_query_filters_usage(self, hid):
        hid.enumerate.return_value = [
            enumerate_item(b"/dev/hidraw1", usage_page=0x0001, usage=0x06),
            enumerate_item(b"/dev/hidraw2"),
        ]
        devices = hid_helper.find_keypad_devices()
        hid.enumerate.assert_called_once_with(0x1189, 0x8840)
        self.assertEqual([d.path for d in devices], [b"/dev/hidraw2"])
        self.assertEqual(devices[0].product, "Keypad")
        self.assertEqual(devices[0].manufacturer, "")

    @patch("keypadmapper.device.hid_helper.hid")
    def test_query_by_path(self, hid):
        hid.enumerate.return_value = [
            enumerate_item(b"/dev/hidraw1", vendor_id=0x1234),
            enumerate_item(b"/dev/hidraw2"),
        ]
        devices = hid_helper.find_keypad_devices(hid_helper.KeypadQuery(path="/dev/hidraw1"))
        hid.enumerate.assert_called_once_with(0, 0)
        self.assertEqual([d.path_str for d in devices], ["/dev/hidraw1"])


class TestHidHelper(unittest.TestCase):
    def setUp(self):
        self.device = hid_helper.KeypadDevice(path=b"/dev/hidraw2")

    @patch("keypadmapper.device.hid_helper.hid")
    def test_scoped_open_and_close(self, hid):
        interface = hid.Device.return_value
        interface.read.return_value = b"\x03\xfb"
        with hid_helper.HidHelper(self.device, log=MagicMock()) as hid_io:
            self.assertTrue(hid_io.interface_acquired())
            hid_io.write(bytearray([0x03, 0xfb]))
            self.assertEqual(hid_io.read(250), b"\x03\xfb")
        hid.Device.assert_called_once_with(path=b"/dev/hidraw2")
        interface.write.assert_called_once_with(b"\x03\xfb")
        interface.read.assert_called_once_with(65, timeout=250)
        interface.close.assert_called_once()
        self.assertFalse(hid_io.interface_acquired())

    @patch("keypadmapper.device.hid_helper.hid")
    def test_closed_on_error(self, hid):
        interface = hid.Device.return_value
        with self.assertRaises(RuntimeError):
            with hid_helper.HidHelper(self.device, log=MagicMock()):
                raise RuntimeError("task failed")
        interface.close.assert_called_once()

    @patch("keypadmapper.device.hid_helper.hid")
    def test_permission_hint(self, hid):
        hid.HIDException = type("HIDException", (Exception,), {})
        hid.Device.side_effect = hid.HIDException("unable to open device")
        log = MagicMock()
        with self.assertRaises(hid.HIDException):
            hid_helper.HidHelper(self.device, log=log).open()
        log.error.assert_called_once()
        self.assertIn("udev", log.error.call_args[0][0])

    def test_io_without_interface(self):
        helper = hid_helper.HidHelper(self.device, log=MagicMock())
        with self.assertRaises(TransportError):
            helper.write(b"\x03")
        with self.assertRaises(TransportError):
            helper.read(250)

    @patch("keypadmapper.device.hid_helper.hid")
    def test_with_keypad(self, hid):
        interface = hid.Device.return_value
        result = hid_helper.with_keypad(self.device, lambda keypad: keypad, log=MagicMock())
        self.assertIsInstance(result, Keypad)
        self.assertIs(result.device, self.device)
        interface.close.assert_called_once()


if __name__ == '__main__':
    unittest.main()
