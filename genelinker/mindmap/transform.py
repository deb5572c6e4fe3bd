# genelinker/mindmap/transform.py
# Pan/zoom arithmetic, kept apart from drawing so it can be tested bare.
from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

ZOOM_STEP = 1.2
MIN_SCALE = 0.3
MAX_SCALE = 3.0


@dataclass(frozen=True)
class ViewTransform:
    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    def __post_init__(self):
        if not self.scale > 0:
            raise ValueError(f"scale must be > 0, got {self.scale}")

    def to_screen(self, x: float, y: float) -> Tuple[float, float]:
        # translate, then scale: the canvas-context order
        return (self.offset_x + x * self.scale, self.offset_y + y * self.scale)

    def to_canvas(self, sx: float, sy: float) -> Tuple[float, float]:
        return ((sx - self.offset_x) / self.scale, (sy - self.offset_y) / self.scale)


IDENTITY = ViewTransform()


def clamp_scale(s: float) -> float:
    return max(MIN_SCALE, min(MAX_SCALE, s))


def zoom_in(t: ViewTransform, step: float = ZOOM_STEP) -> ViewTransform:
    return replace(t, scale=clamp_scale(t.scale * step))


def zoom_out(t: ViewTransform, step: float = ZOOM_STEP) -> ViewTransform:
    return replace(t, scale=clamp_scale(t.scale / step))


def pan(t: ViewTransform, dx: float, dy: float) -> ViewTransform:
    return replace(t, offset_x=t.offset_x + dx, offset_y=t.offset_y + dy)


def reset(_: Optional[ViewTransform] = None) -> ViewTransform:
    return IDENTITY


class DragState:
    """Last sampled cursor position while a button is held; no inertia."""

    def __init__(self):
        self.active = False
        self.last: Tuple[float, float] = (0.0, 0.0)

    def press(self, x: float, y: float) -> None:
        self.active = True
        self.last = (x, y)

    def move(self, x: float, y: float) -> Tuple[float, float]:
        if not self.active:
            return (0.0, 0.0)
        dx, dy = x - self.last[0], y - self.last[1]
        self.last = (x, y)
        return (dx, dy)

    def release(self) -> None:
        self.active = False


class Viewport:
    """Mutable holder of the shared transform; listeners fire on every change."""

    def __init__(self, transform: ViewTransform = IDENTITY):
        self.transform = transform
        self.drag = DragState()
        self._listeners: List[Callable[[ViewTransform], None]] = []

    def subscribe(self, fn: Callable[[ViewTransform], None]) -> None:
        self._listeners.append(fn)

    def _set(self, t: ViewTransform) -> ViewTransform:
        if t != self.transform:
            self.transform = t
            for fn in list(self._listeners):
                fn(t)
        return self.transform

    def zoom_in(self) -> ViewTransform:
        return self._set(zoom_in(self.transform))

    def zoom_out(self) -> ViewTransform:
        return self._set(zoom_out(self.transform))

    def reset(self) -> ViewTransform:
        return self._set(reset())

    def pan_by(self, dx: float, dy: float) -> ViewTransform:
        return self._set(pan(self.transform, dx, dy))

    def press(self, x: float, y: float) -> None:
        self.drag.press(x, y)

    def move(self, x: float, y: float) -> ViewTransform:
        dx, dy = self.drag.move(x, y)
        if dx or dy:
            return self._set(pan(self.transform, dx, dy))
        return self.transform

    def release(self) -> None:
        self.drag.release()
