import logging
import pathlib
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Optional

try:
    import hid
except ImportError:
    print("""Library hidapi missing. Please Install:

    Ubuntu/Debian
    =============
    apt install libhidapi-hidraw0
    or
    apt install libhidapi-libusb0

    Fedora
    ======
    dnf install hidapi

    Arch Linux
    ==========
    pacman -Sy hidapi

    OSX
    ===
    brew install hidapi

    Windows
    =======
    Installation procedure for Windows is described in the libusb/hidapi README.
    """)
    raise

from keypadmapper.device.device_settings import DEVICE_SETTINGS
from keypadmapper.device.errors import TransportError
from keypadmapper.device.keypad import Keypad
from keypadmapper.device.transport import REQUEST_SIZE

UDEV_RULES = pathlib.Path(__file__).parent.resolve() / "99-keypad.rules"


@dataclass(frozen=True)
class KeypadDevice:
    path: bytes
    vendor_id: int = 0
    product_id: int = 0
    usage_page: int = 0
    usage: int = 0
    interface_number: int = -1
    product: str = ""
    manufacturer: str = ""
    serial: str = ""

    @property
    def path_str(self):
        return self.path.decode(errors="replace") if isinstance(self.path, bytes) else str(self.path)


@dataclass(frozen=True)
class KeypadQuery:
    """Attributes a device must match, None matches anything"""
    vendor_id: Optional[int] = None
    product_id: Optional[int] = None
    usage_page: Optional[int] = None
    usage: Optional[int] = None
    path: Optional[str] = None

    def matches(self, device):
        if self.path is not None and device.path_str != self.path:
            return False
        for attr in ("vendor_id", "product_id", "usage_page", "usage"):
            expected = getattr(self, attr)
            if expected is not None and getattr(device, attr) != expected:
                return False
        return True


DEFAULT_KEYPAD_QUERY = KeypadQuery(
    vendor_id=DEVICE_SETTINGS.VID,
    product_id=DEVICE_SETTINGS.PID,
    usage_page=DEVICE_SETTINGS.HID_USAGE_PAGE,
    usage=DEVICE_SETTINGS.HID_USAGE,
)


def find_keypad_devices(query=DEFAULT_KEYPAD_QUERY):
    """List all HID interfaces matching the query, by default the keypad's configuration interface"""
    devices = []
    for item in hid.enumerate(query.vendor_id or 0, query.product_id or 0):
        device = KeypadDevice(
            path=item["path"],
            vendor_id=item.get("vendor_id", 0),
            product_id=item.get("product_id", 0),
            usage_page=item.get("usage_page", 0),
            usage=item.get("usage", 0),
            interface_number=item.get("interface_number", -1),
            product=item.get("product_string") or "",
            manufacturer=item.get("manufacturer_string") or "",
            serial=item.get("serial_number") or "",
        )
        if query.matches(device):
            devices.append(device)
    return devices


class HidHelper:
    """
    Exclusive access to one keypad interface.

    Use as context manager, the interface is closed on every exit path:

        with HidHelper(device) as hid_io:
            send_request(hid_io, request)
    """

    def __init__(self, device, log=None):
        self.device = device
        self.log = log or logging.getLogger('KeypadMapper')
        self.interface = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def open(self):
        if self.interface is not None:
            return
        try:
            self.interface = hid.Device(path=self.device.path)
        except hid.HIDException as e:
            self.log.error("""It looks like you do not have permission to access the keypad.
Please run the following commands, then reconnect the device and try again:

sudo cp %s /etc/udev/rules.d
sudo udevadm control --reload-rules
sudo udevadm trigger
""", UDEV_RULES)
            raise e
        self.log.debug("Opened keypad %s", self.device.path_str)

    def close(self):
        if self.interface is None:
            return
        self.interface.close()
        self.interface = None
        self.log.debug("Closed keypad %s", self.device.path_str)

    def interface_acquired(self):
        return self.interface is not None

    def write(self, data):
        if self.interface is None:
            raise TransportError("No Interface")
        return self.interface.write(bytes(data))

    def read(self, timeout):
        if self.interface is None:
            raise TransportError("No Interface")
        return self.interface.read(REQUEST_SIZE, timeout=timeout)


@contextmanager
def open_keypad(device, log=None):
    """Keypad session bound to a HidHelper, closed when the block is left"""
    with HidHelper(device, log) as hid_io:
        yield Keypad(device, hid_io, log)


def with_keypad(device, task, log=None):
    """Run task(keypad) on a freshly opened keypad and return its result"""
    with open_keypad(device, log) as keypad:
        return task(keypad)
