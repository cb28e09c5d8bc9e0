class EncodingError(ValueError):
    """A value cannot be encoded into a keypad report, e.g. too many key actions"""


class TransportError(IOError):
    """The keypad did not answer or answered with an unexpected report"""
