# genelinker/server/mindmap_routes.py
from __future__ import annotations
import logging, math
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from genelinker.errors import UserInputError
from genelinker.export.files import attachment
from genelinker.mindmap.adapter import mindmap_payload
from genelinker.mindmap.layout import layout_mindmap
from genelinker.mindmap.render import MindMapView, png_bytes, render_mindmap
from genelinker.mindmap.transform import ViewTransform, clamp_scale
from genelinker.mindmap.verify import verify_mindmap
from genelinker.models import AnalysisResult
from genelinker.server.services import Services, get_services

log = logging.getLogger(__name__)

router = APIRouter(prefix="/mindmap", tags=["mindmap"])

VIEW_ACTIONS = ("zoom_in", "zoom_out", "reset", "pan", "press", "move", "release")


def _parse_analysis(body: Dict[str, Any]) -> AnalysisResult:
    raw = (body or {}).get("analysis")
    if not isinstance(raw, dict):
        raise HTTPException(status_code=400, detail="body must contain an 'analysis' object")
    try:
        return AnalysisResult.model_validate(raw)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"invalid analysis: {e.errors()[:3]}")


def _parse_transform(raw: Optional[Dict[str, Any]]) -> ViewTransform:
    if not raw:
        return ViewTransform()
    try:
        scale = float(raw.get("scale", 1.0))
        ox = float(raw.get("offset_x", 0.0))
        oy = float(raw.get("offset_y", 0.0))
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"invalid transform: {e}")
    if not all(math.isfinite(v) for v in (scale, ox, oy)):
        raise HTTPException(status_code=400, detail="transform values must be finite")
    if scale <= 0:
        raise HTTPException(status_code=400, detail=f"scale must be > 0, got {scale}")
    return ViewTransform(scale=clamp_scale(scale), offset_x=ox, offset_y=oy)


def _view_state(view: MindMapView) -> Dict[str, Any]:
    t = view.viewport.transform
    return {"scale": t.scale, "offset_x": t.offset_x, "offset_y": t.offset_y, "renders": view.renders}


def _require_view(svc: Services) -> MindMapView:
    if svc.workspace.view is None:
        raise UserInputError("No mind map yet. Analyze a paper and generate one first.")
    return svc.workspace.view


@router.post("/layout")
def layout(body: Dict[str, Any] = Body(...)):
    mm = layout_mindmap(_parse_analysis(body))
    return JSONResponse({"ok": True, "mindmap": mindmap_payload(mm), "stats": verify_mindmap(mm)})


@router.post("/render")
def render(body: Dict[str, Any] = Body(...)):
    mm = layout_mindmap(_parse_analysis(body))
    img = render_mindmap(mm, _parse_transform(body.get("transform")))
    return Response(content=png_bytes(img), media_type="image/png")


@router.post("/generate")
def generate(svc: Services = Depends(get_services)):
    outcome = svc.workspace.get("analysis")
    if outcome is None:
        raise UserInputError("No analysis available. Analyze a paper first.")
    mm = layout_mindmap(outcome.value)
    if svc.workspace.view is None:
        svc.workspace.view = MindMapView(mm)
    else:
        svc.workspace.view.set_map(mm)
    log.info("mind map generated: %d nodes", len(mm.nodes))
    return JSONResponse({"ok": True, "mindmap": mindmap_payload(mm), "view": _view_state(svc.workspace.view)})


def _point(body: Optional[Dict[str, Any]], kx: str, ky: str):
    try:
        x, y = float((body or {}).get(kx, 0)), float((body or {}).get(ky, 0))
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"{kx} and {ky} must be numbers")
    if not (math.isfinite(x) and math.isfinite(y)):
        raise HTTPException(status_code=400, detail=f"{kx} and {ky} must be finite")
    return x, y


@router.post("/view/{action}")
def view_action(action: str, body: Dict[str, Any] = Body(default={}),
                svc: Services = Depends(get_services)):
    if action not in VIEW_ACTIONS:
        raise HTTPException(status_code=400, detail=f"unknown action: {action}")
    view = _require_view(svc)
    vp = view.viewport
    if action == "pan":
        vp.pan_by(*_point(body, "dx", "dy"))
    elif action in ("press", "move"):
        # cursor position in screen pixels; move pans by the delta since the last sample
        getattr(vp, action)(*_point(body, "x", "y"))
    else:
        getattr(vp, action)()
    return {"ok": True, "view": _view_state(view)}


@router.get("/image")
def image(svc: Services = Depends(get_services)):
    return Response(content=png_bytes(_require_view(svc).image), media_type="image/png")


@router.get("/export")
def export(svc: Services = Depends(get_services)):
    name, content = _require_view(svc).export_png()
    return Response(content=content, media_type="image/png", headers=attachment(name))
