"""Tests for capturing the running Python stack."""

from stack_to_graph.core.capture import capture_stack_trace
from stack_to_graph.core.stack_parser import StackParser


def _outer() -> str:
    return _inner()


def _inner() -> str:
    return capture_stack_trace()


class Widget:
    """Class whose method captures a stack."""

    def render(self) -> str:
        return capture_stack_trace()


class TestCaptureStackTrace:
    """Tests for capture_stack_trace."""

    def test_innermost_first(self) -> None:
        """Test that the capturing function comes before its caller."""
        frames = StackParser().parse(_outer())
        names = [frame.function for frame in frames]

        assert names.index("_inner") < names.index("_outer")
        assert names.index("_outer") < names.index("test_innermost_first")

    def test_header_line(self) -> None:
        """Test that the text starts with a thread header."""
        assert capture_stack_trace().startswith("thread ")

    def test_method_receiver(self) -> None:
        """Test that a method's class becomes the receiver."""
        frame = StackParser().parse(Widget().render())[0]

        assert frame.function == "render"
        assert frame.receiver == "Widget"
        assert frame.file == __file__
        assert frame.package.endswith("test_capture")

    def test_nested_function(self) -> None:
        """Test that a nested function is named after itself."""

        def helper() -> str:
            return capture_stack_trace()

        frame = StackParser().parse(helper())[0]

        assert frame.function == "helper"
        assert frame.receiver == ""

    def test_method_of_nested_class(self) -> None:
        """Test that a class defined in a function still gives the receiver."""

        class Local:
            def run(self) -> str:
                return capture_stack_trace()

        frame = StackParser().parse(Local().run())[0]

        assert frame.function == "run"
        assert frame.receiver == "Local"

    def test_limit(self) -> None:
        """Test that the number of frames can be capped."""
        assert len(StackParser().parse(capture_stack_trace(limit=2))) == 2

    def test_internal_frames_skipped(self) -> None:
        """Test that the capture function itself is not in the stack."""
        frames = StackParser().parse(capture_stack_trace())

        assert "capture_stack_trace" not in {f.function for f in frames}
