"""Genera -- preview server.

Thin HTTP wrapper around the generator for an interactive front end.
Renders run synchronously per request; when parameters change quickly the
client tags each request with an increasing ``request_id`` and only the
newest one gets an image back, older ones answer ``{"stale": true}``.

Launch:
    python -m genera.server
    # or: uvicorn genera.server:app --reload
"""

from __future__ import annotations

import base64
import io
import threading
import time
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from genera.art.palettes import gen_palette, hsl, rgb_to_hex
from genera.canvas.raster import RasterSurface
from genera.core.params import DEFAULT_PARAMS, PaletteMode, Params
from genera.core.rng import DeterministicRNG
from genera.pipeline.generate import generate

MAX_CANVAS = 2048

app = FastAPI(title="Genera")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Application state
# ---------------------------------------------------------------------------

class AppState:
    def __init__(self):
        self.seed: int = 42
        self.width: int = 600
        self.height: int = 600
        self.params: Params = DEFAULT_PARAMS
        self._latest_request_id: int = -1
        self._lock = threading.Lock()

    def claim(self, request_id: int) -> bool:
        """Record ``request_id`` as the newest; False if a newer one was seen."""
        with self._lock:
            if request_id < self._latest_request_id:
                return False
            self._latest_request_id = request_id
            return True

    def is_latest(self, request_id: int) -> bool:
        with self._lock:
            return request_id == self._latest_request_id

    def merged_params(self, overrides: dict[str, Any] | None) -> Params:
        if not overrides:
            return self.params
        data = self.params.model_dump()
        data.update(overrides)
        return Params.model_validate(data)

    def get_state_payload(self) -> dict:
        return {
            "seed": self.seed,
            "width": self.width,
            "height": self.height,
            "params": self.params.model_dump(),
        }

    def reset(self):
        self.__init__()


state = AppState()


def _image_to_base64(img) -> str:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("ascii")


def _palette_payload(palette: list[tuple[float, float, float]]) -> dict:
    return {
        "palette": [list(c) for c in palette],
        "swatches": [rgb_to_hex(hsl(*c)) for c in palette],
    }


def _bad_size(width: int, height: int) -> JSONResponse | None:
    if not (0 < width <= MAX_CANVAS and 0 < height <= MAX_CANVAS):
        return JSONResponse(
            {"error": f"Canvas size must be within 1..{MAX_CANVAS}, got {width}x{height}"},
            status_code=400,
        )
    return None


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class GenerateRequest(BaseModel):
    request_id: int
    seed: int | None = None
    width: int | None = None
    height: int | None = None
    params: dict[str, Any] | None = None

class PaletteRequest(BaseModel):
    seed: int
    mode: PaletteMode = "warm"

class SettingsRequest(BaseModel):
    seed: int | None = None
    width: int | None = None
    height: int | None = None
    params: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------

@app.get("/api/state")
def api_state():
    return JSONResponse(state.get_state_payload())


@app.post("/api/generate")
def api_generate(req: GenerateRequest):
    seed = state.seed if req.seed is None else req.seed
    width = state.width if req.width is None else req.width
    height = state.height if req.height is None else req.height
    err = _bad_size(width, height)
    if err is not None:
        return err
    try:
        params = state.merged_params(req.params)
    except ValidationError as e:
        return JSONResponse({"error": e.errors(include_url=False, include_context=False)}, status_code=422)

    if not state.claim(req.request_id):
        return JSONResponse({"stale": True, "request_id": req.request_id})

    t0 = time.perf_counter()
    surface = RasterSurface(width, height)
    palette = generate(surface, width, height, params, seed)
    elapsed = time.perf_counter() - t0

    # A newer request arrived while rendering: drop this result.
    if not state.is_latest(req.request_id):
        return JSONResponse({"stale": True, "request_id": req.request_id})

    return JSONResponse({
        "stale": False,
        "request_id": req.request_id,
        "seed": seed,
        "width": width,
        "height": height,
        "image": _image_to_base64(surface.to_image()),
        "digest": surface.digest(),
        "elapsed": round(elapsed, 3),
        **_palette_payload(palette),
    })


@app.post("/api/palette")
def api_palette(req: PaletteRequest):
    palette = gen_palette(DeterministicRNG(req.seed), req.mode)
    return JSONResponse({"seed": req.seed, "mode": req.mode, **_palette_payload(palette)})


@app.post("/api/settings")
def api_settings(req: SettingsRequest):
    """Update any combination of the default seed, canvas size and parameters."""
    width = state.width if req.width is None else req.width
    height = state.height if req.height is None else req.height
    err = _bad_size(width, height)
    if err is not None:
        return err
    try:
        params = state.merged_params(req.params)
    except ValidationError as e:
        return JSONResponse({"error": e.errors(include_url=False, include_context=False)}, status_code=422)
    if req.seed is not None:
        state.seed = req.seed
    state.width = width
    state.height = height
    state.params = params
    return JSONResponse(state.get_state_payload())


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn
    print("Starting server at http://localhost:8000")
    uvicorn.run(app, host="0.0.0.0", port=8000)
