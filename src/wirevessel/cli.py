"""
Command-line interface for wirevessel.

Builds a vessel from a parameter file and/or flags and writes its exports.
"""

import argparse
import math
import sys

from wirevessel.config import load_config, save_default_config
from wirevessel.models import VesselParameters, Viewport, load_parameters, save_default_parameters
from wirevessel.tracer import configure_tracer, get_tracer

# flag name -> VesselParameters field
PARAM_FLAGS = {
    "top_radius": float,
    "neck_radius": float,
    "belly_radius": float,
    "base_radius": float,
    "total_height": float,
    "horizontal_wires": int,
    "vertical_wires": int,
    "diagonal_wires": int,
    "wire_thickness": float,
    "tilt_angle": float,
    "metal_type": str,
    "color": str,
}


def build_parser():
    parser = argparse.ArgumentParser(
        description="wirevessel: woven wire vessel generator with SVG, PNG and OBJ export",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Build a vessel and export it")
    run_parser.add_argument("--params", "-p", default=None, help="YAML or JSON parameter file")
    run_parser.add_argument("--out", "-o", required=True, help="Output directory")
    run_parser.add_argument("--config", "-c", default=None, help="Path to YAML configuration file")
    run_parser.add_argument(
        "--formats", nargs="+", default=["svg", "png", "obj"],
        choices=["svg", "png", "obj"], help="Exports to write",
    )
    run_parser.add_argument("--width", type=int, default=None, help="Viewport width in pixels")
    run_parser.add_argument("--height", type=int, default=None, help="Viewport height in pixels")
    run_parser.add_argument("--orbit-left", type=float, default=0.0, help="Orbit the camera left (degrees)")
    run_parser.add_argument("--orbit-up", type=float, default=0.0, help="Orbit the camera up (degrees)")
    run_parser.add_argument("--zoom", type=float, default=1.0, help="Camera distance factor (<1 closer)")
    for name, kind in PARAM_FLAGS.items():
        run_parser.add_argument(f"--{name.replace('_', '-')}", dest=name, type=kind, default=None)
    run_parser.add_argument("--trace", action="store_true", help="Enable runtime tracing")
    run_parser.add_argument(
        "--trace-level", default="INFO",
        choices=["ERROR", "WARN", "INFO", "DEBUG"], help="Trace log level",
    )
    run_parser.add_argument("--trace-file", default=None, help="Path to write trace logs")
    run_parser.add_argument("--trace-json", action="store_true", help="Enable JSON trace output")

    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument("--out", "-o", default="wirevessel_config.yaml", help="Output path")

    params_parser = subparsers.add_parser("init-params", help="Create default parameter file")
    params_parser.add_argument("--out", "-o", default="vessel.yaml", help="Output path")

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "run":
        return handle_run(args)
    elif args.command == "init-config":
        save_default_config(args.out)
        print(f"Default configuration saved to: {args.out}")
    elif args.command == "init-params":
        save_default_parameters(args.out)
        print(f"Default parameters saved to: {args.out}")

    return 0


def resolve_parameters(args):
    """Parameter file values overridden by any flags given."""
    params = load_parameters(args.params) if args.params else VesselParameters()
    overrides = {name: getattr(args, name) for name in PARAM_FLAGS if getattr(args, name) is not None}
    if overrides:
        params = VesselParameters.model_validate({**params.model_dump(), **overrides})
    return params


def resolve_camera(args, config, viewport):
    """Default camera moved by the orbit flags, applied without damping."""
    from wirevessel.render.camera import OrbitController, camera_from_config

    controller = OrbitController(camera_from_config(config.camera, viewport), enable_damping=False)
    controller.rotate_left(math.radians(args.orbit_left))
    controller.rotate_up(math.radians(args.orbit_up))
    controller.dolly(args.zoom)
    return controller.update()


def handle_run(args):
    """Handle the run command."""
    config = load_config(args.config)
    configure_tracer(
        enabled=args.trace or config.tracing.enabled,
        level=args.trace_level if args.trace else config.tracing.level,
        file_path=args.trace_file or config.tracing.file_path,
        json_output=args.trace_json or config.tracing.json_output,
    )
    tracer = get_tracer()

    try:
        from wirevessel.pipeline import run_pipeline

        params = resolve_parameters(args)
        viewport = Viewport(
            width=args.width or config.viewport.width,
            height=args.height or config.viewport.height,
        )
        camera = resolve_camera(args, config, viewport)

        with tracer.span("cli_run", module="cli"):
            result = run_pipeline(
                params, args.out,
                config=config,
                formats=args.formats,
                camera=camera,
                viewport=viewport,
            )

        print("\nVessel exported.")
        for family, count in result.wire_counts.items():
            print(f"  {family:<10} {count}")
        print(f"  Validation errors: {result.validation.error_count}")
        print(f"  Validation warnings: {result.validation.warning_count}")
        print(f"\nOutputs saved to: {args.out}/")
        for path in result.files.values():
            print(f"  - {path}")

        return 1 if result.validation.has_errors else 0

    except Exception as e:
        tracer.event(f"Run failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1
    finally:
        get_tracer().config.close()


if __name__ == "__main__":
    sys.exit(main())
