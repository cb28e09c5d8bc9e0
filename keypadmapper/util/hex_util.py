import re


def to_hex_str(data, strip_zeros=False):
    """ Format bytes as space separated hex, optionally without the trailing zero padding """
    text = bytes(data).hex(" ")
    if strip_zeros:
        text = re.sub(r"( 00)+$", "", text)
    return text


def from_hex_str(text):
    """ Parse hex text like '03 fa 0f 01-01 00:12', every non hex character is ignored """
    return bytes.fromhex(re.sub(r"[^0-9a-fA-F]", "", text))
