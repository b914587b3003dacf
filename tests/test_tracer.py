"""Tests for the tracer module."""

import json
import os

import numpy as np
import pytest


@pytest.fixture(autouse=True)
def _reset_tracer():
    yield
    from inscribe.tracer import configure_tracer
    configure_tracer(enabled=False)


class TestSummarize:
    """Tests for object summarization."""

    def test_numpy_array_summary(self):
        """Test that numpy arrays are summarized with shape and type."""
        from inscribe.tracer import summarize

        arr = np.zeros((120, 2), dtype=np.float64)
        summary = summarize(arr)

        assert "ndarray" in summary
        assert "120x2" in summary
        assert "float64" in summary

    def test_summary_capped_length(self):
        """Test that summary never exceeds max length."""
        from inscribe.tracer import summarize

        large_dict = {f"key_{i}": f"value_{i}" for i in range(100)}

        assert len(summarize(large_dict, max_len=40)) <= 40

    def test_list_summary(self):
        """Test list summarization."""
        from inscribe.tracer import summarize

        summary = summarize([1, 2, 3, 4, 5])

        assert "list" in summary
        assert "len=5" in summary

    def test_string_summary(self):
        """Test long string summarization."""
        from inscribe.tracer import summarize

        summary = summarize("a" * 1000)

        assert "str" in summary
        assert "len=1000" in summary

    def test_scalars(self):
        """Test int, float and None summaries."""
        from inscribe.tracer import summarize

        assert summarize(None) == "None"
        assert summarize(42) == "42"
        assert summarize(0.0375) == "0.0375"

    def test_pydantic_model_summary(self):
        """Test Pydantic model summarization."""
        from inscribe.models import CurvePoint
        from inscribe.tracer import summarize

        summary = summarize(CurvePoint(x=1.0, y=2.0))

        assert "CurvePoint" in summary


class TestTracerSpan:
    """Tests for tracer span functionality."""

    def test_span_nesting(self, capsys):
        """Test that spans produce start, end and indented inner lines."""
        from inscribe.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        tracer = get_tracer()

        with tracer.span("outer", module="test"):
            with tracer.span("inner", module="test"):
                tracer.event("inside")

        lines = capsys.readouterr().err.strip().split("\n")

        assert len(lines) == 5
        assert "test:outer  start" in lines[0]
        assert "  test:inner  start" in lines[1]
        assert "inside" in lines[2]
        assert "end ok" in lines[3]
        assert "end ok" in lines[4]

    def test_span_records_failure(self, capsys):
        """Test that an exception inside a span is logged and re-raised."""
        from inscribe.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        tracer = get_tracer()

        with pytest.raises(RuntimeError):
            with tracer.span("boom", module="test"):
                raise RuntimeError("broken")

        err = capsys.readouterr().err
        assert "ERROR" in err
        assert "RuntimeError: broken" in err
        assert tracer._depth == 0
        assert tracer._span_stack == []

    def test_level_filtering(self, capsys):
        """Test that events above the configured level are dropped."""
        from inscribe.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="WARN")
        tracer = get_tracer()

        tracer.event("quiet", level="INFO")
        tracer.event("loud", level="WARN")

        err = capsys.readouterr().err
        assert "quiet" not in err
        assert "loud" in err

    def test_tracer_disabled_no_output(self, capsys):
        """Test that disabled tracer produces no output."""
        from inscribe.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=False)
        tracer = get_tracer()

        with tracer.span("test", module="test"):
            tracer.event("should not appear")

        assert capsys.readouterr().err == ""

    def test_file_and_json_output(self, temp_dir, capsys):
        """Test that trace lines are mirrored to a file with JSON records."""
        from inscribe.tracer import configure_tracer, get_tracer

        path = os.path.join(temp_dir, "trace.log")
        configure_tracer(enabled=True, file_path=path, json_output=True)
        tracer = get_tracer()

        tracer.event("hello", count=3)
        tracer.config.close()

        with open(path, "r", encoding="utf-8") as f:
            lines = f.read().strip().split("\n")

        assert "hello count=3" in lines[0]
        record = json.loads(lines[1])
        assert record["message"] == "hello count=3"
        assert record["meta"] == {"count": "3"}


class TestTraceDecorator:
    """Tests for the @trace decorator."""

    def test_decorator_runs_function(self):
        """Test that decorated function executes normally."""
        from inscribe.tracer import configure_tracer, trace

        configure_tracer(enabled=False)

        @trace(label="test_func")
        def my_func(x):
            return x * 2

        assert my_func(5) == 10

    def test_decorator_with_exception(self):
        """Test that decorator lets exceptions through."""
        from inscribe.tracer import configure_tracer, trace

        configure_tracer(enabled=True)

        @trace(label="failing_func")
        def failing_func():
            raise ValueError("test error")

        with pytest.raises(ValueError):
            failing_func()

    def test_decorator_summarizes_selected_args(self, capsys):
        """Test that arg_names are bound and shown on the start line."""
        from inscribe.tracer import configure_tracer, trace

        configure_tracer(enabled=True)

        @trace(label="scaled", arg_names=["factor"])
        def scaled(values, factor=1.0):
            return [v * factor for v in values]

        assert scaled([1, 2], factor=2.5) == [2.5, 5.0]

        err = capsys.readouterr().err
        assert "scaled  start factor=2.5" in err
        assert "values" not in err
