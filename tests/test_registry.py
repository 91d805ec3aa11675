import unittest

from symhl.core.colors import ColorAssigner
from symhl.core.errors import HighlightRenderError
from symhl.core.registry import HighlightRegistry
from symhl.core.styles import TRANSIENT_STYLE
from symhl.core.symbols import SymbolMatcher, anchored_pattern
from tests.fakes import FakeRenderer


class RegistryTestCase(unittest.TestCase):
    def setUp(self):
        self.renderer = FakeRenderer()
        self.registry = HighlightRegistry(self.renderer)
        self.registry.attach_buffer("a", "python")
        self.registry.attach_buffer("b", "css")
        self.matcher = SymbolMatcher()
        self.foo = self.matcher.symbol_for("foo")


class ToggleTests(RegistryTestCase):
    def test_toggle_round_trip(self):
        self.assertTrue(self.registry.toggle(self.foo))
        self.assertTrue(self.registry.is_explicit("foo"))
        self.assertIn(anchored_pattern("foo", "python"), self.renderer.registered("a"))
        self.assertIn(anchored_pattern("foo", "css"), self.renderer.registered("b"))

        self.assertFalse(self.registry.toggle(self.foo))
        self.assertFalse(self.registry.is_explicit("foo"))
        self.assertEqual(self.renderer.registered("a"), {})
        self.assertEqual(self.renderer.registered("b"), {})
        self.assertEqual(self.registry.registered_patterns("a"), {})

    def test_style_uses_hashed_color(self):
        entry = self.registry.add(self.foo)
        self.assertEqual(entry.style.background, ColorAssigner().color_for("foo").name())
        self.assertEqual(entry.style.foreground, "")

    def test_foreground_color_is_applied(self):
        self.registry.set_foreground_color("#000000")
        self.assertEqual(self.registry.add(self.foo).style.foreground, "#000000")

    def test_add_twice_keeps_one_entry(self):
        first = self.registry.add(self.foo)
        self.assertIs(self.registry.add(self.foo), first)
        self.assertEqual(len(self.registry.entries()), 1)

    def test_remove_all_and_list(self):
        self.registry.add(self.foo)
        self.registry.add(self.matcher.symbol_for("bar"))
        self.assertEqual([text for text, _style in self.registry.list_all()], ["foo", "bar"])
        self.assertEqual(self.registry.remove_all(), 2)
        self.assertEqual(self.registry.list_all(), [])
        self.assertFalse(self.registry.remove(self.foo))


class RehighlightTests(RegistryTestCase):
    def test_rehighlight_is_idempotent(self):
        self.registry.add(self.foo)
        calls = len(self.renderer.calls)
        self.assertEqual(self.registry.rehighlight("a"), 0)
        self.assertEqual(self.registry.rehighlight("a"), 0)
        self.assertEqual(len(self.renderer.calls), calls)

    def test_new_buffer_picks_up_explicit_symbols(self):
        self.registry.add(self.foo)
        self.assertEqual(self.registry.rehighlight("c", "plaintext"), 1)
        self.assertIn(anchored_pattern("foo"), self.renderer.registered("c"))
        self.assertIn(("refresh", "c"), self.renderer.calls)
        self.assertEqual(self.registry.rehighlight("c", "plaintext"), 0)

    def test_language_change_reanchors_patterns(self):
        entry = self.registry.add(self.foo)
        self.registry.set_transient("a", self.matcher.symbol_for("bar"))
        self.assertEqual(self.registry.rehighlight("a", "css"), 1)
        self.assertEqual(self.renderer.registered("a"), {anchored_pattern("foo", "css"): entry.style})
        self.assertIsNone(self.registry.transient_symbol("a"))
        self.assertIn(("unregister", "a", anchored_pattern("foo", "python")), self.renderer.calls)

    def test_detach_does_not_touch_renderer(self):
        self.registry.add(self.foo)
        calls = len(self.renderer.calls)
        self.registry.detach_buffer("a")
        self.assertEqual(len(self.renderer.calls), calls)
        self.assertEqual(self.registry.buffer_ids(), ["b"])


class TransientTests(RegistryTestCase):
    def test_transient_is_registered_with_named_style(self):
        self.assertTrue(self.registry.set_transient("a", self.foo))
        self.assertEqual(self.registry.transient_symbol("a"), self.foo)
        self.assertEqual(self.renderer.registered("a")[anchored_pattern("foo", "python")], TRANSIENT_STYLE)
        self.assertEqual(self.renderer.registered("b"), {})

    def test_explicit_replaces_transient(self):
        self.registry.set_transient("a", self.foo)
        entry = self.registry.add(self.foo)
        self.assertIsNone(self.registry.transient_symbol("a"))
        self.assertEqual(self.renderer.registered("a")[anchored_pattern("foo", "python")], entry.style)

    def test_explicit_symbol_cannot_become_transient(self):
        self.registry.add(self.foo)
        self.assertFalse(self.registry.set_transient("a", self.foo))
        self.assertIsNone(self.registry.transient_symbol("a"))

    def test_new_transient_replaces_old_one(self):
        bar = self.matcher.symbol_for("bar")
        self.registry.set_transient("a", self.foo)
        self.registry.set_transient("a", bar)
        self.assertEqual(list(self.renderer.registered("a")), [anchored_pattern("bar", "python")])

    def test_clear_transient(self):
        self.assertFalse(self.registry.clear_transient("a"))
        self.registry.set_transient("a", self.foo)
        self.assertTrue(self.registry.clear_transient("a"))
        self.assertEqual(self.renderer.registered("a"), {})

    def test_remove_all_keeps_transient(self):
        self.registry.set_transient("a", self.foo)
        self.registry.add(self.matcher.symbol_for("bar"))
        self.registry.remove_all()
        self.assertEqual(self.registry.transient_symbol("a"), self.foo)


class FailureTests(RegistryTestCase):
    def test_renderer_failure_rolls_back(self):
        self.renderer.fail_on_buffer = "b"
        with self.assertRaises(HighlightRenderError):
            self.registry.add(self.foo)
        self.assertFalse(self.registry.is_explicit("foo"))
        self.assertEqual(self.renderer.registered("a"), {})
        self.assertEqual(self.registry.registered_patterns("a"), {})
        self.assertIn(("unregister", "a", anchored_pattern("foo", "python")), self.renderer.calls)

    def test_registry_recovers_after_failure(self):
        self.renderer.fail_on_register = True
        with self.assertRaises(HighlightRenderError):
            self.registry.toggle(self.foo)
        self.renderer.fail_on_register = False
        self.assertTrue(self.registry.toggle(self.foo))

    def test_failed_remove_keeps_every_registration(self):
        entry = self.registry.add(self.foo)
        self.renderer.fail_unregister_on_buffer = "b"
        with self.assertRaises(HighlightRenderError):
            self.registry.toggle(self.foo)
        self.assertTrue(self.registry.is_explicit("foo"))
        self.assertEqual(self.renderer.registered("a"), {anchored_pattern("foo", "python"): entry.style})
        self.assertEqual(self.renderer.registered("b"), {anchored_pattern("foo", "css"): entry.style})
        self.assertEqual(self.registry.registered_patterns("a"), self.renderer.registered("a"))

        self.renderer.fail_unregister_on_buffer = None
        self.assertFalse(self.registry.toggle(self.foo))
        self.assertEqual(self.renderer.registered("b"), {})

    def test_failed_add_keeps_transient(self):
        self.registry.set_transient("a", self.foo)
        self.renderer.fail_on_buffer = "b"
        with self.assertRaises(HighlightRenderError):
            self.registry.add(self.foo)
        self.assertEqual(self.registry.transient_symbol("a"), self.foo)
        self.assertEqual(self.renderer.registered("a"), {anchored_pattern("foo", "python"): TRANSIENT_STYLE})


if __name__ == "__main__":
    unittest.main()
