"""
Call-site resolution for error reports.

Log calls usually sit several frames below the application code that decided
to log: the host logging library and its adapters add their own wrapper
frames. The resolver walks outward from the formatter and returns the first
frame that does not belong to one of the skipped packages.
"""

from __future__ import annotations

import inspect
from types import FrameType
from typing import Collection, Iterable

from .entry import ReportLocation

# error_origin() itself, its caller (Formatter.to_entry) and that caller's
# caller (Formatter.format). Tied to the wrapping depth of Formatter.format.
CALLER_DEPTH = 3

VENDOR_MARKER = "._vendor."


def caller_frames(depth: int = 0) -> list[FrameType]:
    """Frames of the current stack, innermost first.

    Index 0 is the caller of this function; the first ``depth`` frames are
    dropped.
    """
    frame = inspect.currentframe()
    try:
        frame = frame.f_back if frame is not None else None
        for _ in range(depth):
            if frame is None:
                break
            frame = frame.f_back
        frames = []
        while frame is not None:
            frames.append(frame)
            frame = frame.f_back
        return frames
    finally:
        del frame


def _unvendor(name: str) -> str:
    return name.rpartition(VENDOR_MARKER)[2]


def frame_package(frame: FrameType) -> str:
    """Declaring package of a frame, with vendoring prefixes removed."""
    package = frame.f_globals.get("__package__")
    if package is None:
        package = frame.f_globals.get("__name__", "").rpartition(".")[0]
    return _unvendor(package)


def frame_module(frame: FrameType) -> str:
    """Declaring module of a frame, with vendoring prefixes removed."""
    return _unvendor(frame.f_globals.get("__name__", ""))


def resolve_origin(frames: Iterable[FrameType], skip: Collection[str]) -> ReportLocation | None:
    """Location of the first frame outside the ``skip`` packages, or None.

    A skip entry matches a frame's package exactly, or its module exactly;
    the latter lets top-level wrapper modules be skipped on their own.
    """
    for frame in frames:
        if frame_package(frame) in skip or frame_module(frame) in skip:
            continue
        return ReportLocation(
            file_path=frame.f_code.co_filename,
            line_number=frame.f_lineno,
            function_name=frame.f_code.co_name,
        )
    return None


def error_origin(skip: Collection[str]) -> ReportLocation | None:
    return resolve_origin(caller_frames(CALLER_DEPTH), skip)
