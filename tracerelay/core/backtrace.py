"""Structured stack traces for the /stacktrace label."""

from __future__ import annotations

import json
import traceback
from typing import Any, Iterable, Mapping, Union

from .types import StackFrame

Frame = Union[StackFrame, Mapping[str, Any]]

# (source key, output key); mappings use "class", StackFrame uses class_name
_FIELDS = (
    ("line", "line_number"),
    ("file", "file_name"),
    ("function", "method_name"),
    ("class", "class_name"),
)


def format_backtrace(frames: Iterable[Frame]) -> str:
    """
    Serialize frames as ``{"stack_frame": [...]}``.

    Frame order is preserved; fields a frame does not carry are omitted.
    """
    return json.dumps({"stack_frame": [map_stack_frame(frame) for frame in frames]})


def map_stack_frame(frame: Frame) -> dict[str, Any]:
    if isinstance(frame, StackFrame):
        source = {
            "line": frame.line,
            "file": frame.file,
            "function": frame.function,
            "class": frame.class_name,
        }
    else:
        source = frame

    data: dict[str, Any] = {}
    for key, out_key in _FIELDS:
        value = source.get(key)
        if value is not None:
            data[out_key] = value
    return data


def capture_backtrace(limit: int | None = None, skip: int = 1) -> list[StackFrame]:
    """
    Capture the current call stack, innermost frame first.

    Args:
        limit: Maximum number of frames to keep
        skip: Innermost frames to drop (1 drops this function)
    """
    summary = traceback.extract_stack()
    summary.reverse()
    frames = [
        StackFrame(line=entry.lineno, file=entry.filename, function=entry.name)
        for entry in summary[skip:]
    ]
    if limit is not None:
        frames = frames[:limit]
    return frames
