"""Tests for the tracer module."""

import json

import numpy as np
import pytest


class TestSummarize:
    """Tests for object summarization."""

    def test_numpy_array_summary(self):
        """Test that numpy arrays are summarized with shape and type."""
        from regionmask.tracer import summarize

        arr = np.zeros((100, 200), dtype=np.float64)
        summary = summarize(arr)

        assert "ndarray" in summary
        assert "100x200" in summary
        assert "float64" in summary

    def test_boolean_mask_summary_counts_pixels(self):
        """Test that boolean masks report how many pixels are set."""
        from regionmask.tracer import summarize

        mask = np.zeros((10, 10), dtype=bool)
        mask[2:4, 2:5] = True

        assert "true=6" in summarize(mask)

    def test_pixel_grid_summary(self):
        """Test that pixel grids show their ranges."""
        from regionmask.models import PixelGrid
        from regionmask.tracer import summarize

        grid = PixelGrid(x_min=3, x_max=10, y_min=-2, y_max=4)

        assert summarize(grid) == "PixelGrid(x=3..10,y=-2..4)"

    def test_pixel_array_reports_finite_range(self):
        """Test that pixel cut-outs report the range of their finite values."""
        from regionmask.tracer import summarize

        pixels = np.array([[np.nan, 2.0], [-1.5, 7.0]])

        assert "range=-1.5..7" in summarize(pixels)
        assert "empty" in summarize(np.full((2, 2), np.nan))

    def test_summary_capped_length(self):
        """Test that summary never exceeds max length."""
        from regionmask.tracer import summarize

        large_dict = {f"key_{i}": f"value_{i}" for i in range(100)}
        summary = summarize(large_dict, max_len=20)

        assert len(summary) <= 20

    def test_string_summary(self):
        """Test long string summarization."""
        from regionmask.tracer import summarize

        summary = summarize("a" * 1000)

        assert "str" in summary
        assert "len=1000" in summary

    def test_none_summary(self):
        from regionmask.tracer import summarize

        assert summarize(None) == "None"


class TestTracerSpan:
    """Tests for tracer span functionality."""

    def test_span_nesting(self, capsys):
        """Test that nested spans and events are all written."""
        from regionmask.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        tracer = get_tracer()

        with tracer.span("outer", module="test"):
            with tracer.span("inner", module="test"):
                tracer.event("inside")

        lines = capsys.readouterr().err.strip().split("\n")

        # start/end for both spans plus the event
        assert len(lines) == 5
        assert "test:inner  inside" in lines[2]
        assert lines[2].index("test:inner") > lines[0].index("test:outer")

    def test_level_filtering(self, capsys):
        """Test that events above the configured level are dropped."""
        from regionmask.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="WARN")
        tracer = get_tracer()

        tracer.event("debug detail", level="DEBUG")
        tracer.event("info detail")
        tracer.event("careful", level="WARN")

        err = capsys.readouterr().err
        assert "careful" in err
        assert "detail" not in err

    def test_failed_span_logs_error(self, capsys):
        """Test that a failing span is reported and the exception propagates."""
        from regionmask.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        tracer = get_tracer()

        with pytest.raises(RuntimeError):
            with tracer.span("boom", module="test"):
                raise RuntimeError("broken")

        err = capsys.readouterr().err
        assert "ERROR" in err
        assert "RuntimeError: broken" in err

        # depth is restored after the failure
        assert tracer._depth == 0
        assert tracer._span_stack == []

    def test_json_output(self, capsys):
        """Test that JSON records are emitted alongside text lines."""
        from regionmask.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO", json_output=True)
        get_tracer().event("hello", count=3)

        lines = capsys.readouterr().err.strip().split("\n")
        record = json.loads(lines[-1])
        assert record["message"] == "hello count=3"
        assert record["meta"] == {"count": "3"}

    def test_trace_file(self, temp_dir):
        """Test that trace lines are mirrored to a file."""
        import os
        from regionmask.tracer import configure_tracer, get_tracer

        path = os.path.join(temp_dir, "trace.log")
        configure_tracer(enabled=True, level="INFO", file_path=path)
        get_tracer().event("written to file")
        get_tracer().config.close()

        with open(path, encoding="utf-8") as f:
            assert "written to file" in f.read()

    def test_tracer_disabled_no_output(self, capsys):
        """Test that disabled tracer produces no output."""
        from regionmask.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=False)
        tracer = get_tracer()

        with tracer.span("test", module="test"):
            tracer.event("should not appear")

        assert capsys.readouterr().err == ""


class TestTraceDecorator:
    """Tests for the @trace decorator."""

    def test_decorator_runs_function(self):
        from regionmask.tracer import configure_tracer, trace

        configure_tracer(enabled=True)

        @trace(label="test_func")
        def my_func(x):
            return x * 2

        assert my_func(5) == 10

    def test_decorator_with_exception(self):
        """Test that decorator propagates exceptions."""
        from regionmask.tracer import configure_tracer, trace

        configure_tracer(enabled=False)

        @trace(label="failing_func")
        def failing_func():
            raise ValueError("test error")

        with pytest.raises(ValueError):
            failing_func()
