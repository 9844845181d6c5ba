"""Generation parameters.

``Params`` is immutable and every field is required; defaults live in the
separate ``DEFAULT_PARAMS`` instance.  Numeric ranges are documented but not
enforced here -- out-of-range values produce degenerate output downstream
rather than an error.  Only the enumerations are checked.
"""

from __future__ import annotations

from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict

PaletteMode = Literal["analogous", "complementary", "triadic", "warm", "neon", "mono"]
LayoutMode = Literal["scatter", "grid", "radial", "noise", "cluster", "burst"]
ColorStrategy = Literal["pool", "noise", "field"]
SymmetryMode = Literal["none", "bilateral", "quad", "rotational"]
BgStyle = Literal["flat", "subtle", "gradient"]

PALETTE_MODES: tuple[str, ...] = get_args(PaletteMode)
LAYOUT_MODES: tuple[str, ...] = get_args(LayoutMode)
COLOR_STRATEGIES: tuple[str, ...] = get_args(ColorStrategy)
SYMMETRY_MODES: tuple[str, ...] = get_args(SymmetryMode)
BG_STYLES: tuple[str, ...] = get_args(BgStyle)


class Params(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    # Structure
    density: float
    complexity: float
    organicness: float
    # Size / opacity ranges (min <= max is the caller's responsibility)
    size_min: float
    size_max: float
    opacity_min: float
    opacity_max: float
    rotation_spread: float
    stroke_ratio: float
    palette_mode: PaletteMode
    layout: LayoutMode
    noise_scale: float
    noise_influence: float
    color_strategy: ColorStrategy
    oscillator_freq: float
    oscillator_amp: float
    symmetry_mode: SymmetryMode
    layer_count: int
    layer_fade: float
    # Lighting (angle in degrees)
    light_angle: float
    light_intensity: float
    gradient_shapes: bool
    # Linework intensities, 0-1
    bead_chains: float
    typo_scatter: float
    tangles: float
    bg_style: BgStyle
    # Atmosphere intensities, 0-1
    atmo_clouds: float
    atmo_ribbons: float
    atmo_blooms: float
    atmo_rays: float
    outline_weight: float


DEFAULT_PARAMS = Params(
    density=0.35,
    complexity=0.5,
    organicness=0.3,
    size_min=4,
    size_max=80,
    opacity_min=0.1,
    opacity_max=0.88,
    rotation_spread=0.5,
    stroke_ratio=0.2,
    palette_mode="warm",
    layout="cluster",
    noise_scale=1,
    noise_influence=0.3,
    color_strategy="pool",
    oscillator_freq=0,
    oscillator_amp=0,
    symmetry_mode="none",
    layer_count=2,
    layer_fade=0.3,
    light_angle=315,
    light_intensity=0.5,
    gradient_shapes=True,
    bead_chains=0.3,
    typo_scatter=0.2,
    tangles=0.3,
    bg_style="gradient",
    atmo_clouds=0.3,
    atmo_ribbons=0.2,
    atmo_blooms=0.15,
    atmo_rays=0,
    outline_weight=0.5,
)
