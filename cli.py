#!/usr/bin/env python
"""
Command-line interface for the OSM entity extractor

Usage:
    python cli.py --type node -i isle-of-man.osm.pbf --ids 286973603
    python cli.py --type way -i isle-of-man.osm.pbf --tags building=yes -o buildings.geojson
    python cli.py --type relation -i isle-of-man.osm.pbf --ids 58446 --polygonize --compact
"""

import sys
import argparse
from dataclasses import replace

from loguru import logger

from osmextract.config import get_config
from osmextract.pipeline import ExtractPipeline
from osmextract.stream.osmium_reader import set_decode_threads


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def cmd_extract(args) -> int:
    """Extract entities and write them as GeoJSON"""
    setup_logging(args.verbose)
    
    try:
        config = replace(get_config(), compact=args.compact)
        if args.jobs is not None:
            config = replace(config, workers=args.jobs)
        
        pipeline = ExtractPipeline(config)
        set_decode_threads(config.workers)
        collection = pipeline.run(
            kind=args.type,
            input_path=args.input,
            ids=args.ids,
            tags=args.tags,
            polygonize=args.polygonize
        )
        pipeline.save(collection, args.output)
        return 0
    
    except Exception as e:
        print(e)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


class ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors"""
    
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = ArgumentParser(
        description="Extract OSM nodes, ways or relations as GeoJSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Tag filters:
  key             key must be present
  key=value       key must have this value
  key=/regex/     value must match the regular expression

Examples:
  python cli.py --type way -i region.osm.pbf --tags highway,name=/^A/
  python cli.py --type relation -i region.osm.pbf --ids 58446 --polygonize
        """
    )
    parser.add_argument("--type", required=True, help="Entity type (node, way, or relation)")
    parser.add_argument("-i", "--input", required=True, help="Input file (.osm.pbf format)")
    parser.add_argument("-o", "--output", default="", help="Output file (GeoJSON), stdout if omitted or -")
    parser.add_argument("--ids", default="", help="Comma separated ID filter")
    parser.add_argument("--tags", default="", help="Comma separated tag filter")
    parser.add_argument("--polygonize", action="store_true", help="Build polygons from ways and relations")
    parser.add_argument("-j", "--jobs", type=int, default=None, help="Decode parallelism (default: CPU count)")
    parser.add_argument("--compact", action="store_true", help="Compact output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.set_defaults(func=cmd_extract)
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
