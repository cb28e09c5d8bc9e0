import unittest

from keypadmapper.util.dict_util import invert_dict, find_key_by_value


class TestDictUtil(unittest.TestCase):

    def test_invert_dict(self):
        self.assertEqual(invert_dict({"a": 1, "b": 2}), {1: "a", 2: "b"})

    def test_invert_dict_first_key_wins(self):
        self.assertEqual(invert_dict({"Pad1": 1, "PadEnd": 1, "x": 2}), {1: "Pad1", 2: "x"})

    def test_invert_empty(self):
        self.assertEqual(invert_dict({}), {})

    def test_find_key_by_value(self):
        d = {"Left": 0, "Click": 1, "Right": 2}
        self.assertEqual(find_key_by_value(d, 2), "Right")
        self.assertIsNone(find_key_by_value(d, 3))


if __name__ == '__main__':
    unittest.main()
