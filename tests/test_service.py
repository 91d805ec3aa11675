import unittest

from symhl.core.service import SymbolHighlightService
from symhl.core.symbols import anchored_pattern
from tests.fakes import FakeBuffer, FakeRenderer, FakeScheduler

PY_SOURCE = "foo = 1\ndef f():\n    foo = 2\n    return foo\nfoo\n"


class ServiceTestCase(unittest.TestCase):
    settings = None

    def setUp(self):
        self.renderer = FakeRenderer()
        self.scheduler = FakeScheduler()
        self.messages = []
        self.service = SymbolHighlightService(
            self.renderer,
            self.scheduler,
            self.settings,
            show_message=self.messages.append,
        )
        self.buffer = FakeBuffer("foo bar foo", 0)
        self.service.on_buffer_opened(self.buffer)

    def run_command(self, name):
        return self.service.run_command(f"action.{name}", getattr(self.service, name))


class CommandTests(ServiceTestCase):
    def test_no_symbol_becomes_message(self):
        self.buffer = FakeBuffer("foo   ", 5, buffer_id="blank")
        self.service.on_buffer_opened(self.buffer)
        self.service.set_current_buffer("blank")
        self.assertIsNone(self.run_command("toggle_highlight"))
        self.assertEqual(self.messages, ["No symbol at point"])

    def test_toggle_reports_occurrence(self):
        self.assertTrue(self.run_command("toggle_highlight"))
        self.assertEqual(self.messages, ["Occurrence 1/2 in buffer"])
        self.assertIn(anchored_pattern("foo"), self.renderer.registered("buf"))
        self.assertFalse(self.run_command("toggle_highlight"))
        self.assertEqual(self.renderer.registered("buf"), {})

    def test_new_buffer_gets_explicit_highlights(self):
        self.run_command("toggle_highlight")
        other = FakeBuffer("x = foo", 0, buffer_id="other", language_id="python")
        self.service.on_buffer_opened(other)
        self.assertIn(anchored_pattern("foo", "python"), self.renderer.registered("other"))

    def test_list_and_remove_all(self):
        self.run_command("toggle_highlight")
        listed = self.run_command("list_highlighted")
        self.assertEqual([text for text, _style in listed], ["foo"])
        self.assertEqual(self.messages[-1], "Highlighted: foo")
        self.assertEqual(self.run_command("remove_all_highlights"), 1)
        self.run_command("list_highlighted")
        self.assertEqual(self.messages[-1], "No highlighted symbols")

    def test_report_and_list_occurrences(self):
        self.buffer.cursor = 9
        self.assertEqual(self.run_command("report_occurrence"), "Occurrence 2/2 in buffer")
        found = self.run_command("list_occurrences")
        self.assertEqual([item.column for item in found], [1, 9])
        self.assertEqual(self.messages[-1], "2 occurrences of 'foo'")


class JumpCommandTests(ServiceTestCase):
    def test_jump_reports_position(self):
        result = self.run_command("jump_next")
        self.assertEqual(result.offset, 8)
        self.assertEqual(self.buffer.cursor, 8)
        self.assertEqual(self.messages, ["Occurrence 2/2 in buffer"])

    def test_jump_back_restores_position(self):
        self.run_command("jump_next")
        self.run_command("jump_next")
        self.assertEqual(self.buffer.cursor, 0)
        self.assertTrue(self.service.jump_back())
        self.assertEqual(self.buffer.cursor, 0)
        self.assertFalse(self.service.jump_back())
        self.assertEqual(self.messages[-1], "No earlier jump position")

    def test_scoped_jump_outside_function(self):
        self.assertIsNone(self.run_command("jump_next_in_scope"))
        self.assertEqual(self.messages, ["Not inside a function"])

    def test_scoped_jump_inside_function(self):
        source = FakeBuffer(PY_SOURCE, PY_SOURCE.index("foo = 2"), buffer_id="py", language_id="python")
        self.service.on_buffer_opened(source)
        self.service.set_current_buffer("py")
        self.run_command("jump_next_in_scope")
        self.assertEqual(source.cursor, PY_SOURCE.index("return foo") + len("return "))
        self.assertEqual(self.messages[-1], "Occurrence 2/2 in function")
        result = self.run_command("jump_next_in_scope")
        self.assertTrue(result.wrapped)
        self.assertEqual(source.cursor, PY_SOURCE.index("foo = 2"))


class IgnoreListTests(ServiceTestCase):
    settings = {"ignore_list": ["^TODO$"]}

    def test_ignored_symbol_cannot_be_toggled(self):
        self.buffer = FakeBuffer("TODO foo TODO", 1, buffer_id="todo")
        self.service.on_buffer_opened(self.buffer)
        self.service.set_current_buffer("todo")
        self.assertIsNone(self.run_command("toggle_highlight"))
        self.assertEqual(self.messages, ["No symbol at point"])
        self.assertEqual(self.service.registry.list_all(), [])

    def test_ignore_list_can_be_reconfigured(self):
        self.service.apply_settings({"ignore_list": ["^foo$"]})
        self.assertIsNone(self.run_command("toggle_highlight"))
        self.assertEqual(self.messages, ["No symbol at point"])


class QuietNavigationTests(ServiceTestCase):
    settings = {"occurrence_message": ["explicit"], "idle_delay": 0}

    def test_wrap_notice_only_when_navigation_messages_are_off(self):
        self.run_command("jump_next")
        self.assertEqual(self.messages, [])
        self.run_command("jump_next")
        self.assertEqual(self.messages, ["Continued from beginning of buffer"])

    def test_scoped_wrap_names_the_function(self):
        source = FakeBuffer(PY_SOURCE, PY_SOURCE.index("return foo") + len("return "), buffer_id="py", language_id="python")
        self.service.on_buffer_opened(source)
        self.service.set_current_buffer("py")
        self.run_command("jump_next_in_scope")
        self.assertEqual(source.cursor, PY_SOURCE.index("foo = 2"))
        self.assertEqual(self.messages, ["Continued from beginning of function"])

    def test_every_command_refreshes_transient(self):
        self.service.on_command_completed("move")
        self.assertEqual(self.service.registry.transient_symbol("buf").text, "foo")


class IdleTests(ServiceTestCase):
    def test_idle_timer_highlights_current_buffer(self):
        self.assertEqual(len(self.scheduler.active), 1)
        self.scheduler.fire()
        self.assertEqual(self.service.registry.transient_symbol("buf").text, "foo")

    def test_apply_settings_rearms_timer(self):
        self.service.apply_settings({"idle_delay": 0.4})
        self.assertEqual(self.scheduler.cancelled, [1])
        self.assertEqual(self.scheduler.scheduled[-1][1], 0.4)

    def test_shutdown_stops_timer(self):
        self.service.shutdown()
        self.assertEqual(self.scheduler.active, [])


class ReplaceTests(ServiceTestCase):
    def test_replace_moves_explicit_highlight(self):
        self.run_command("toggle_highlight")
        result = self.service.run_command(
            "action.replace_symbol",
            lambda: self.service.replace_symbol_interactive("baz"),
        )
        self.assertEqual(result.replacements, 2)
        self.assertEqual(self.buffer.text(), "baz bar baz")
        self.assertFalse(self.service.registry.is_explicit("foo"))
        self.assertTrue(self.service.registry.is_explicit("baz"))
        self.assertEqual(self.messages[-1], "Replaced 2 occurrences of 'foo' with 'baz'.")

    def test_empty_replacement_is_rejected(self):
        with self.assertRaises(ValueError):
            self.service.replace_symbol_interactive("")


class BufferLifecycleTests(ServiceTestCase):
    def test_closing_current_buffer_switches(self):
        other = FakeBuffer("bar", 0, buffer_id="other")
        self.service.on_buffer_opened(other)
        self.assertIs(self.service.current_buffer(), self.buffer)
        self.service.on_buffer_closed("buf")
        self.assertIs(self.service.current_buffer(), other)
        self.service.on_buffer_closed("other")
        self.assertIsNone(self.service.current_buffer())
        self.assertIsNone(self.run_command("toggle_highlight"))
        self.assertEqual(self.messages[-1], "No active buffer")


if __name__ == "__main__":
    unittest.main()
