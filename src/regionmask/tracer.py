"""
Hierarchical runtime tracing for region mask extraction.

Provides structured, nested logging with timing information so that a mask
extraction can be followed stage by stage without stepping through code.
"""

import functools
import json
import sys
import time
from contextlib import contextmanager
from datetime import datetime

import numpy as np


class TracerConfig:
    """Configuration for the tracer."""

    def __init__(self):
        self.enabled = False
        self.level = "INFO"
        self.file_path = None
        self.json_output = False
        self._file_handle = None

    def configure(self, enabled=False, level="INFO", file_path=None, json_output=False):
        """Configure tracer settings."""
        self.enabled = enabled
        self.level = level.upper()
        self.file_path = file_path
        self.json_output = json_output

        self.close()
        if file_path and enabled:
            self._file_handle = open(file_path, "w", encoding="utf-8")

    def close(self):
        """Close file handle if open."""
        if self._file_handle:
            self._file_handle.close()
            self._file_handle = None


class Tracer:
    """
    Hierarchical tracer for structured extraction logging.

    Spans nest and are timed; events attach to the innermost open span.
    Lines go to stderr, optionally mirrored to a file and as JSON records.
    """

    LEVELS = {"ERROR": 0, "WARN": 1, "INFO": 2, "DEBUG": 3}

    def __init__(self):
        self.config = TracerConfig()
        self._depth = 0
        self._span_stack = []

    def _should_log(self, level):
        if not self.config.enabled:
            return False
        return self.LEVELS.get(level, 2) <= self.LEVELS.get(self.config.level, 2)

    def _write(self, level, module, func, message, meta=None):
        if not self._should_log(level):
            return

        now = datetime.now()
        timestamp = now.strftime("%H:%M:%S.") + f"{now.microsecond // 1000:03d}"
        location = f"{module}:{func}" if func else module
        lines = [f"{timestamp} {level:<5} {'  ' * self._depth}{location}  {message}"]

        if self.config.json_output:
            lines.append(json.dumps({
                "timestamp": timestamp,
                "level": level,
                "depth": self._depth,
                "module": module,
                "function": func,
                "message": message,
                "meta": {k: summarize(v) for k, v in (meta or {}).items()},
            }))

        for line in lines:
            print(line, file=sys.stderr)
            if self.config._file_handle:
                self.config._file_handle.write(line + "\n")
        if self.config._file_handle:
            self.config._file_handle.flush()

    @contextmanager
    def span(self, name, module=""):
        """
        Context manager for a traced span.

        Logs start and end with timing information. A failing span is
        logged at ERROR level and the exception is re-raised.
        """
        if not self.config.enabled:
            yield
            return

        start_time = time.perf_counter()
        self._write("INFO", module, name, "start")
        self._depth += 1
        self._span_stack.append((name, module))

        try:
            yield
        except Exception as e:
            elapsed = (time.perf_counter() - start_time) * 1000
            self._depth -= 1
            self._span_stack.pop()
            self._write("ERROR", module, name, f"failed dt={elapsed:.0f}ms error={type(e).__name__}: {str(e)[:100]}")
            raise

        elapsed = (time.perf_counter() - start_time) * 1000
        self._depth -= 1
        self._span_stack.pop()
        self._write("INFO", module, name, f"end ok dt={elapsed:.0f}ms")

    def event(self, message, level="INFO", **meta):
        """Log a one-off event within the current span."""
        if not self._should_log(level):
            return

        func, module = self._span_stack[-1] if self._span_stack else ("", "")

        meta_str = " ".join(f"{k}={summarize(v)}" for k, v in meta.items())
        self._write(level, module, func, f"{message} {meta_str}".strip(), meta)


def summarize(obj, max_len=200):
    """
    Summarize an event value for logging.

    Returns a compact string that never exceeds max_len chars. Masks report
    their set pixel count, pixel arrays their finite value range, and pixel
    grids their coordinate ranges.
    """
    result = _summarize_impl(obj)
    if len(result) > max_len:
        return result[:max_len - 3] + "..."
    return result


def _summarize_impl(obj):
    if obj is None:
        return "None"

    if isinstance(obj, np.ndarray):
        shape_str = "x".join(str(s) for s in obj.shape)
        if obj.dtype == bool:
            return f"ndarray(bool,{shape_str},true={int(obj.sum())})"
        finite = obj[np.isfinite(obj)] if obj.dtype.kind == "f" else obj
        if finite.size == 0:
            return f"ndarray({obj.dtype},{shape_str},empty)"
        return f"ndarray({obj.dtype},{shape_str},range={finite.min():g}..{finite.max():g})"

    # PixelGrid
    if hasattr(obj, "x_min") and hasattr(obj, "y_max"):
        return f"{type(obj).__name__}(x={obj.x_min}..{obj.x_max},y={obj.y_min}..{obj.y_max})"

    if isinstance(obj, str):
        if len(obj) > 50:
            return f"str(len={len(obj)})"
        return repr(obj)

    if isinstance(obj, dict):
        keys_str = ",".join(str(k) for k in list(obj)[:5])
        return f"dict(len={len(obj)},keys=[{keys_str}])"

    if isinstance(obj, (bool, int, float)):
        return str(obj)

    return f"<{type(obj).__name__}>"


def trace(label=None):
    """
    Decorator to trace function execution.

    Wraps a function in a span named label (or the function name) under its
    module's short name.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not _tracer.config.enabled:
                return func(*args, **kwargs)

            with _tracer.span(label or func.__name__, module=func.__module__.split(".")[-1]):
                return func(*args, **kwargs)

        return wrapper
    return decorator


# Global tracer instance
_tracer = Tracer()


def get_tracer():
    """Get the global tracer instance."""
    return _tracer


def configure_tracer(enabled=False, level="INFO", file_path=None, json_output=False):
    """Configure the global tracer."""
    _tracer.config.configure(
        enabled=enabled,
        level=level,
        file_path=file_path,
        json_output=json_output,
    )
