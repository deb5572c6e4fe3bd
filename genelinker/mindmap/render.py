# genelinker/mindmap/render.py
# Raster renderer for a laid-out MindMap (Pillow).
from __future__ import annotations
import io, logging
from functools import lru_cache
from typing import Callable, List, Optional, Tuple

from PIL import Image, ImageColor, ImageDraw, ImageFont

from genelinker.errors import ExportError
from genelinker.export.files import png_filename
from genelinker.mindmap.layout import CANVAS_SIZE, MindMap, MindMapNode
from genelinker.mindmap.transform import IDENTITY, Viewport, ViewTransform

log = logging.getLogger(__name__)

EDGE_COLOR = "#e5e7eb"
EDGE_WIDTH = 2
BORDER_COLOR = "#ffffff"
BORDER_WIDTH = 3
TEXT_COLOR = "#ffffff"
FONT_SIZE = {"central": 14, "branch": 12, "leaf": 10}
LINE_SPACING = 14
MULTIWORD_LIFT = 5
EDGE_ALPHA = 0x80          # gradient rim: same colour at 50% alpha
WRAP_FACTOR = 3.0          # max line width = node diameter * 1.5

_FONT_FILES = ("DejaVuSans.ttf", "Arial.ttf", "arial.ttf")

Measure = Callable[[str], float]


# ---------- text ----------
@lru_cache(maxsize=64)
def load_font(size: int) -> ImageFont.ImageFont:
    size = max(1, int(size))
    for name in _FONT_FILES:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def font_measure(font) -> Measure:
    return lambda s: float(font.getlength(s))


def wrap_label(text: str, max_width: float, measure: Measure) -> List[str]:
    """Greedy first-fit: a word goes on the current line unless the line
    (with its trailing space) would exceed max_width. The first word always
    stays, however wide."""
    words = (text or "").split(" ")
    lines: List[str] = []
    line = ""
    for n, word in enumerate(words):
        test = line + word + " "
        if measure(test) > max_width and n > 0:
            lines.append(line)
            line = word + " "
        else:
            line = test
    lines.append(line)
    return [ln.rstrip(" ") for ln in lines]


def label_lines(node: MindMapNode, measure: Measure) -> List[Tuple[str, float]]:
    """Lines of a node label with their canvas-space baselines (middle anchor)."""
    lines = wrap_label(node.label, node.radius * WRAP_FACTOR, measure)
    y = node.y
    if len(node.label.split(" ")) > 2 and node.kind != "leaf":
        y -= MULTIWORD_LIFT
    out = []
    for ln in lines:
        out.append((ln, y))
        y += LINE_SPACING
    return out


# ---------- drawing ----------
def _rgba(color: str, alpha: int = 255) -> Tuple[int, int, int, int]:
    r, g, b = ImageColor.getrgb(color)[:3]
    return (r, g, b, alpha)


def _gradient_disc(size: Tuple[int, int], cx: float, cy: float, r: float, color: str) -> Image.Image:
    layer = Image.new("RGBA", size, (0, 0, 0, 0))
    d = ImageDraw.Draw(layer)
    steps = max(1, int(r))
    # outermost ring first; each inner disc overwrites the previous one
    for i in range(steps, 0, -1):
        rr = r * i / steps
        frac = rr / r
        alpha = int(round(255 - (255 - EDGE_ALPHA) * frac))
        d.ellipse((cx - rr, cy - rr, cx + rr, cy + rr), fill=_rgba(color, alpha))
    return layer


def _draw_edges(draw: ImageDraw.ImageDraw, mm: MindMap, t: ViewTransform) -> None:
    width = max(1, int(round(EDGE_WIDTH * t.scale)))
    index = {n.id: n for n in mm.nodes}
    for src, dst in mm.edges:
        a, b = index.get(src), index.get(dst)
        if a is None or b is None:
            continue
        draw.line([t.to_screen(a.x, a.y), t.to_screen(b.x, b.y)], fill=EDGE_COLOR, width=width)


def _draw_node(img: Image.Image, node: MindMapNode, t: ViewTransform) -> None:
    sx, sy = t.to_screen(node.x, node.y)
    r = node.radius * t.scale
    img.alpha_composite(_gradient_disc(img.size, sx, sy, r, node.color))

    draw = ImageDraw.Draw(img)
    draw.ellipse((sx - r, sy - r, sx + r, sy + r), outline=BORDER_COLOR,
                 width=max(1, int(round(BORDER_WIDTH * t.scale))))

    size = FONT_SIZE[node.kind]
    # wrap in canvas units, draw in screen units
    lines = label_lines(node, font_measure(load_font(size)))
    screen_font = load_font(max(1, int(round(size * t.scale))))
    for text, y in lines:
        if not text:
            continue
        draw.text(t.to_screen(node.x, y), text, fill=TEXT_COLOR, font=screen_font, anchor="mm")


def render_mindmap(mm: MindMap, transform: ViewTransform = IDENTITY,
                   size: Tuple[int, int] = CANVAS_SIZE,
                   background: Optional[str] = "#ffffff") -> Image.Image:
    bg = _rgba(background) if background else (0, 0, 0, 0)
    img = Image.new("RGBA", size, bg)
    _draw_edges(ImageDraw.Draw(img), mm, transform)
    for node in mm.nodes:
        _draw_node(img, node, transform)
    return img


# ---------- export ----------
def png_bytes(img: Image.Image) -> bytes:
    bio = io.BytesIO()
    try:
        img.save(bio, format="PNG")
    except (OSError, ValueError) as e:
        raise ExportError(f"PNG encode: {e}") from e
    return bio.getvalue()


class MindMapView:
    """A map, its viewport and the last rendered frame; redrawn on every change."""

    def __init__(self, mm: MindMap, viewport: Optional[Viewport] = None,
                 size: Tuple[int, int] = CANVAS_SIZE):
        self.size = size
        self.viewport = viewport or Viewport()
        self.mindmap = mm
        self.renders = 0
        self.image: Image.Image = self._render()
        self.viewport.subscribe(lambda _t: self.refresh())

    def _render(self) -> Image.Image:
        self.renders += 1
        return render_mindmap(self.mindmap, self.viewport.transform, self.size)

    def refresh(self) -> Image.Image:
        self.image = self._render()
        return self.image

    def set_map(self, mm: MindMap) -> Image.Image:
        self.mindmap = mm
        return self.refresh()

    def export_png(self) -> Tuple[str, bytes]:
        name = png_filename(self.mindmap.title)
        log.info("exporting mind map as %s", name)
        return name, png_bytes(self.image)
