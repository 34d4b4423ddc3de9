"""
File writing helpers for wirevessel exports.
"""

import json
import os

from wirevessel.tracer import get_tracer


def ensure_dir(path):
    """Create directory if it does not exist."""
    if path:
        os.makedirs(path, exist_ok=True)


def save_json(data, path, indent=2):
    """Save a dictionary or Pydantic model to JSON."""
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))

    if hasattr(data, "model_dump"):
        data = data.model_dump(mode="json")

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, default=str)

    tracer.event(f"Saved JSON: {path}")


def save_svg(svg_content, path):
    """Save an svgwrite drawing or SVG string to file."""
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))

    if hasattr(svg_content, "tostring"):
        content = svg_content.tostring()
    else:
        content = str(svg_content)

    with open(path, "w", encoding="utf-8") as f:
        f.write(content)

    tracer.event(f"Saved SVG: {path}")


def save_text(text, path):
    """Save plain text (OBJ, MTL) to file."""
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))

    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(text)

    tracer.event(f"Saved text: {path}", chars=len(text))


def save_bytes(data, path):
    """Save binary data (MTL, textures) to file."""
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))

    with open(path, "wb") as f:
        f.write(data)

    tracer.event(f"Saved file: {path}", size=len(data))
