"""
One-shot build-and-export orchestrator for wirevessel.

Opens a view session, builds the wires for one parameter snapshot, writes
the requested exports plus parameters and validation records, and closes
the session on every exit path.
"""

import os

from wirevessel.config import load_config
from wirevessel.io.save_artifacts import ensure_dir, save_json
from wirevessel.models import ExportResult, Viewport
from wirevessel.session import ViewSession
from wirevessel.tracer import get_tracer, trace
from wirevessel.validate.report import generate_report
from wirevessel.validate.rules import run_validation

EXPORT_FORMATS = ("svg", "png", "obj")
BASENAME = "vessel"


@trace(label="run_pipeline")
def run_pipeline(params, out_dir, config=None, config_path=None, formats=EXPORT_FORMATS,
                 camera=None, viewport=None):
    """
    Build the vessel and write its exports.

    Args:
        params: VesselParameters
        out_dir: output directory
        config: VesselConfig object (optional)
        config_path: path to YAML config file (optional)
        formats: any of "svg", "png", "obj"
        camera: CameraSnapshot to export with; default camera from config
        viewport: Viewport; default size from config

    Returns:
        ExportResult describing the written files
    """
    tracer = get_tracer()

    unknown = [f for f in formats if f not in EXPORT_FORMATS]
    if unknown:
        raise ValueError(f"Unknown export formats: {unknown}")

    if config is None:
        config = load_config(config_path)
    if viewport is None:
        viewport = Viewport(width=config.viewport.width, height=config.viewport.height)

    ensure_dir(out_dir)
    files = {}

    session = ViewSession(config, viewport)
    try:
        session.start(camera)
        with tracer.span("rebuild", module="pipeline"):
            layout = session.rebuild(params)

        with tracer.span("export", module="pipeline"):
            if "svg" in formats:
                path = os.path.join(out_dir, f"{BASENAME}.svg")
                session.export_svg(path)
                files["svg"] = path
            if "png" in formats:
                files["png"] = session.export_png(os.path.join(out_dir, f"{BASENAME}.png"))
            if "obj" in formats:
                written = session.export_obj(os.path.join(out_dir, f"{BASENAME}.obj"))
                if written:
                    obj_path, mtl_path = written
                    files["obj"] = obj_path
                    if mtl_path:
                        files["mtl"] = mtl_path

        with tracer.span("validate", module="pipeline"):
            report = run_validation(layout, params, session.camera, viewport, config.profile)
            generate_report(report, out_dir)

        result = ExportResult(
            out_dir=out_dir,
            parameters=params,
            camera=session.camera,
            viewport=viewport,
            files=files,
            wire_counts=layout.counts(),
            validation=report,
        )
    finally:
        session.close()

    save_json(params, os.path.join(out_dir, "parameters.json"))
    tracer.event(f"Pipeline complete: {len(files)} files in {out_dir}")
    return result
