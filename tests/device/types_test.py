import unittest

from keypadmapper.device.types import (
    KeyAction, MouseAction, ConsumerAction, KeypadInfo, KnobIdAndAction, apply_mod_key, create_key_action,
    create_mod_key, get_mod_key_names, combine_mod_key_and_action_name, shift, ctrl, alt, gui, rshift, rctrl,
    ralt, rgui, is_shift, wheel, move, mouse_action, MOUSE, MEDIA, consumer, find_mouse_action, find_mouse_action_name,
    format_mouse_action, format_consumer_action, find_consumer_action, get_key_count, find_knob_action,
    find_knob_action_name, get_key_id_for_knob, get_knob_by_key_id, find_led_mode, find_led_color,
    MOD_CTRL, MOD_SHIFT, MOD_RSHIFT
)


class TestModKeys(unittest.TestCase):

    def test_apply_mod_key(self):
        self.assertEqual(apply_mod_key(KeyAction(0x00, 0x00), 0x20), KeyAction(0x00, 0x20))
        self.assertEqual(apply_mod_key(KeyAction(0x00, 0x01), 0x20), KeyAction(0x00, 0x21))
        self.assertEqual(apply_mod_key(KeyAction(0x00, 0x20), 0x20), KeyAction(0x00, 0x20))

    def test_apply_mod_key_is_idempotent(self):
        action = KeyAction(0x04, MOD_CTRL)
        for bit in (MOD_CTRL, MOD_SHIFT, MOD_RSHIFT):
            once = apply_mod_key(action, bit)
            self.assertEqual(apply_mod_key(once, bit), once)

    def test_apply_mod_key_on_mouse_action(self):
        self.assertEqual(ctrl(MOUSE["LButton"]), MouseAction(mod_key=MOD_CTRL, button=0x01))

    def test_mouse_action(self):
        self.assertEqual(mouse_action(button=0x04, wheel=0xFF), MouseAction(button=0x04, wheel=0xFF))
        self.assertEqual(MOUSE["MButton"], mouse_action(button=0x04))

    def test_mod_key_names(self):
        for mod_key, names in [(0x00, []), (0x01, ["Ctrl"]), (0x03, ["Ctrl", "Shift"]), (0x18, ["Gui", "RCtrl"])]:
            self.assertEqual(get_mod_key_names(mod_key), names)
            self.assertEqual(create_mod_key(names), mod_key)

    def test_create_mod_key_unknown_name(self):
        self.assertIsNone(create_mod_key(["Error"]))
        self.assertIsNone(create_mod_key(["Ctrl", "Error"]))
        self.assertIsNone(create_mod_key(["Error", "Ctrl"]))

    def test_builders(self):
        key_action = create_key_action(0xFE)
        for name, fn in [("Shift", shift), ("Ctrl", ctrl), ("Alt", alt), ("Gui", gui),
                         ("RShift", rshift), ("RCtrl", rctrl), ("RAlt", ralt), ("RGui", rgui)]:
            self.assertEqual(fn(key_action), create_key_action(0xFE, create_mod_key([name])), name)

    def test_create_key_action(self):
        self.assertEqual(create_key_action(0x12, 0x34), KeyAction(key_code=0x12, mod_key=0x34))

    def test_is_shift(self):
        key_action = create_key_action(0x12)
        self.assertTrue(is_shift(shift(key_action)))
        self.assertFalse(is_shift(rshift(key_action)))

    def test_combine_mod_key_and_action_name(self):
        self.assertEqual(combine_mod_key_and_action_name(0x03, "F11"), "Ctrl+Shift+F11")
        self.assertEqual(combine_mod_key_and_action_name(0, "F11"), "F11")


class TestMouseActions(unittest.TestCase):

    def test_wheel_and_move_store_unsigned_bytes(self):
        self.assertEqual(wheel(-1), MouseAction(wheel=0xFF))
        self.assertEqual(wheel(1, MOD_CTRL), MouseAction(mod_key=MOD_CTRL, wheel=0x01))
        self.assertEqual(move(-2, 2), MouseAction(x=0xFE, y=0x02))

    def test_find_mouse_action(self):
        for name, action in MOUSE.items():
            self.assertEqual(find_mouse_action(name), action)
            self.assertEqual(find_mouse_action_name(action), name)
        self.assertIsNone(find_mouse_action("Move"))

    def test_format_mouse_action(self):
        cases = [
            ("MoveLeft", MOUSE["MoveLeft"]),
            ("Move(-2,2)", move(-2, 2)),
            ("Wheel(-2)", wheel(-2)),
            ("Move(0,0)", move(0, 0)),
            ("Ctrl+Wheel(-2)", ctrl(wheel(-2))),
            ("Ctrl+LButton", ctrl(MOUSE["LButton"])),
            ('{"mod_key":0,"button":2,"x":10,"y":0,"wheel":0}', MouseAction(button=0x02, x=10)),
        ]
        for expected, action in cases:
            self.assertEqual(format_mouse_action(action), expected)


class TestConsumerActions(unittest.TestCase):

    def test_media_table(self):
        self.assertEqual(len(MEDIA), 21)
        self.assertEqual(MEDIA["Calculator"], ConsumerAction(0x0192))
        self.assertEqual(find_consumer_action("Mute"), consumer(0x00E2))
        self.assertIsNone(find_consumer_action("Xxx"))

    def test_format_consumer_action(self):
        self.assertEqual(format_consumer_action(MEDIA["MyComputer"]), "MyComputer")
        self.assertEqual(format_consumer_action(consumer(1)), '{"id":1}')


class TestKeypadLayout(unittest.TestCase):

    def test_get_key_count(self):
        self.assertEqual(get_key_count(KeypadInfo(keys=2, knobs=3)), 11)
        self.assertEqual(get_key_count(KeypadInfo()), 0)

    def test_find_knob_action(self):
        self.assertEqual(find_knob_action("Left"), 0)
        self.assertEqual(find_knob_action("Click"), 1)
        self.assertEqual(find_knob_action("Right"), 2)
        self.assertIsNone(find_knob_action("Xxx"))
        self.assertEqual(find_knob_action_name(1), "Click")

    def test_plain_keys_are_no_knobs(self):
        info = KeypadInfo(keys=3, knobs=2)
        for key_id in (1, 2, 3):
            self.assertIsNone(get_knob_by_key_id(info, key_id))

    def test_knob_key_ids(self):
        info = KeypadInfo(keys=3, knobs=2)
        cases = [(1, "Left", 4), (1, "Click", 5), (1, "Right", 6), (2, "Left", 7), (2, "Click", 8), (2, "Right", 9)]
        for knob_id, action_name, key_id in cases:
            self.assertEqual(get_key_id_for_knob(info, knob_id, find_knob_action(action_name)), key_id)
            self.assertEqual(get_knob_by_key_id(info, key_id), KnobIdAndAction(knob_id, action_name))

    def test_knob_key_id_bijection(self):
        for info in (KeypadInfo(0, 1), KeypadInfo(1, 1), KeypadInfo(12, 3)):
            for knob_id in range(1, info.knobs + 1):
                for action_name, action in (("Left", 0), ("Click", 1), ("Right", 2)):
                    key_id = get_key_id_for_knob(info, knob_id, action)
                    self.assertEqual(get_knob_by_key_id(info, key_id), (knob_id, action_name))

    def test_led_lookup(self):
        self.assertEqual(find_led_mode("None"), 0)
        self.assertEqual(find_led_mode("White"), 5)
        self.assertEqual(find_led_color("Red"), 1)
        self.assertEqual(find_led_color("Orange"), 2)
        self.assertEqual(find_led_color("Purple"), 7)
        self.assertIsNone(find_led_mode("Blink"))
        self.assertIsNone(find_led_color("Black"))


if __name__ == '__main__':
    unittest.main()
