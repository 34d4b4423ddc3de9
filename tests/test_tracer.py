"""Tests for the tracer module."""

import json

import numpy as np
import pytest


class TestSummarize:
    """Tests for object summarization."""

    def test_numpy_array_summary(self):
        """Test that numpy arrays are summarized with shape and type."""
        from wirevessel.tracer import summarize

        arr = np.zeros((121, 3), dtype=np.float64)
        summary = summarize(arr)

        assert "ndarray" in summary
        assert "121x3" in summary
        assert "float64" in summary

    def test_summary_capped_length(self):
        """Test that summary never exceeds max length."""
        from wirevessel.tracer import summarize

        large_dict = {f"key_{i}": f"value_{i}" for i in range(100)}
        summary = summarize(large_dict, max_len=40)

        assert len(summary) <= 40

    def test_wire_summary(self):
        """Wires report their family and point count."""
        from wirevessel.geometry.wires import WireFamily, WirePolyline
        from wirevessel.tracer import summarize

        wire = WirePolyline(WireFamily.RING, 0, np.zeros((65, 3)), closed=True)

        assert summarize(wire) == "WirePolyline(ring,n=65)"

    def test_layout_summary(self, scenario_a_params):
        """Layouts report their family sizes."""
        from wirevessel.config import ProfileConfig, ResolutionConfig
        from wirevessel.geometry.wires import recompute
        from wirevessel.tracer import summarize

        layout = recompute(scenario_a_params, ResolutionConfig(curve_samples=8, ring_segments=8), ProfileConfig())

        assert summarize(layout) == "WireLayout(rings=3,verticals=4,diagonals=0)"

    def test_pydantic_model_summary(self, camera):
        from wirevessel.tracer import summarize

        assert "CameraSnapshot" in summarize(camera)

    def test_none_summary(self):
        from wirevessel.tracer import summarize

        assert summarize(None) == "None"


class TestTracerSpan:
    """Tests for tracer span functionality."""

    def test_span_nesting(self, capsys):
        """Spans log start and end lines around nested events."""
        from wirevessel.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        tracer = get_tracer()
        try:
            with tracer.span("outer", module="test"):
                with tracer.span("inner", module="test"):
                    tracer.event("inside")
        finally:
            configure_tracer(enabled=False)

        lines = capsys.readouterr().err.strip().split("\n")
        assert len(lines) == 5
        assert "test:inner" in lines[2]
        assert "inside" in lines[2]

    def test_span_unwinds_on_error(self, capsys):
        """A failing span logs the error and restores the nesting depth."""
        from wirevessel.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        tracer = get_tracer()
        try:
            with pytest.raises(ValueError):
                with tracer.span("rebuild", module="test"):
                    raise ValueError("bad radius")
            assert tracer._depth == 0
            assert tracer._span_stack == []
        finally:
            configure_tracer(enabled=False)

        assert "error=ValueError: bad radius" in capsys.readouterr().err

    def test_level_filter(self, capsys):
        from wirevessel.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="WARN")
        try:
            get_tracer().event("quiet")
            get_tracer().event("loud", level="WARN")
        finally:
            configure_tracer(enabled=False)

        err = capsys.readouterr().err
        assert "quiet" not in err
        assert "loud" in err

    def test_json_output_to_file(self, temp_dir, capsys):
        """JSON lines are mirrored into the trace file."""
        import os

        from wirevessel.tracer import configure_tracer, get_tracer

        path = os.path.join(temp_dir, "trace.jsonl")
        configure_tracer(enabled=True, level="INFO", file_path=path, json_output=True)
        try:
            get_tracer().event("Saved SVG", chars=12)
        finally:
            configure_tracer(enabled=False)

        with open(path, "r", encoding="utf-8") as f:
            record = json.loads(f.readline())
        assert record["message"] == "Saved SVG chars=12"
        assert record["meta"] == {"chars": "12"}

    def test_tracer_disabled_no_output(self, capsys):
        """Test that disabled tracer produces no output."""
        from wirevessel.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=False)
        tracer = get_tracer()

        with tracer.span("test", module="test"):
            tracer.event("should not appear")

        assert capsys.readouterr().err == ""


class TestTraceDecorator:
    """Tests for the @trace decorator."""

    def test_decorator_runs_function(self):
        from wirevessel.tracer import configure_tracer, trace

        configure_tracer(enabled=False)

        @trace(label="double")
        def double(x):
            return x * 2

        assert double(5) == 10

    def test_decorator_logs_selected_kwargs(self, capsys):
        from wirevessel.tracer import configure_tracer, trace

        @trace(label="build", arg_names=["count"])
        def build(count=0, secret=None):
            return count

        configure_tracer(enabled=True)
        try:
            assert build(count=7, secret="x") == 7
        finally:
            configure_tracer(enabled=False)

        err = capsys.readouterr().err
        assert "count=7" in err
        assert "secret" not in err

    def test_decorator_with_exception(self):
        from wirevessel.tracer import configure_tracer, trace

        configure_tracer(enabled=False)

        @trace(label="failing_func")
        def failing_func():
            raise ValueError("test error")

        with pytest.raises(ValueError):
            failing_func()
