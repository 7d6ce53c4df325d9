"""Render a :class:`RadarLayout` to standalone SVG with Jinja2."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from tech_radar.geometry.models import RadarLayout

TEMPLATE_DIR = Path(__file__).parent / "templates"

BLIP_SIZE = 14.0
NEW_BLIP_COLOR = "#bd4257"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
)


def svg_context(layout: RadarLayout) -> dict:
    """Template variables shared by the SVG endpoint and the radar page."""
    return {
        "layout": layout,
        "blip_size": BLIP_SIZE,
        "new_blip_color": NEW_BLIP_COLOR,
    }


def render_svg(layout: RadarLayout) -> str:
    return _env.get_template("radar.svg.j2").render(**svg_context(layout))
