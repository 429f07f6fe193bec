"""Command line host: builds diagrams from site files and exports snapshots."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from .config import settings
from .errors import SiteFileError
from .logging_config import configure_logging
from .render.snapshot import render_snapshot
from .visualizer import EdgeFilter, VoronoiVisualizer

logger = structlog.get_logger()


def list_input_files(directory: Path, pattern: str) -> List[Path]:
    """Files in ``directory`` matching ``pattern``, sorted by name."""
    return sorted(p for p in directory.glob(pattern) if p.is_file())


def snapshot_path(input_path: Path, output_dir: Optional[Path]) -> Path:
    """``<stem>.png`` next to the input, or inside ``output_dir``."""
    name = input_path.name.split('.', 1)[0] + ".png"
    return (output_dir or input_path.parent) / name


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="py-vorviz",
        description="Build Voronoi diagrams of points and segments and export snapshots.",
    )
    parser.add_argument("inputs", nargs="*", type=Path, help="Site files to build")
    parser.add_argument("-d", "--directory", type=Path,
                        help=f"Build every file matching '{settings.input_glob}' in this directory")
    parser.add_argument("-o", "--output-dir", type=Path,
                        help="Directory for snapshots (default: next to each input)")
    parser.add_argument("--primary-only", action="store_true", help="Show primary edges only")
    parser.add_argument("--internal-only", action="store_true", help="Show internal edges only")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(settings)

    inputs = list(args.inputs)
    if args.directory is not None:
        inputs.extend(list_input_files(args.directory, settings.input_glob))
    if not inputs:
        logger.warning("No input files given")
        return 1

    visualizer = VoronoiVisualizer(settings=settings)
    if args.primary_only:
        visualizer.toggle(EdgeFilter.PRIMARY_ONLY)
    if args.internal_only:
        visualizer.toggle(EdgeFilter.INTERNAL_ONLY)

    failures = 0
    try:
        for input_path in inputs:
            logger.info("Building", path=str(input_path))
            try:
                visualizer.build(input_path)
            except SiteFileError as e:
                logger.warning("Skipping input", path=str(input_path), error=str(e))
                failures += 1
                continue
            render_snapshot(visualizer.frame(), snapshot_path(input_path, args.output_dir), settings)
    finally:
        visualizer.close()

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
