#!/usr/bin/env python3
"""
Unified CLI for the barcode scanner.

Usage:
    barscan serve                  # Launch the scan API (port 3000)
    barscan scan <image>           # Decode a local image, print JSON
    barscan scan <image> --engine opencv --decoder pyzbar
    barscan strategies             # List attempts in the order they run
"""

import argparse
import logging
import sys

import config
from logging_utils import configure_logging, add_logging_args
from cli.scan import add_scan_subparser
from cli.strategies import add_strategies_subparser
from decoding import available_decoders
from preprocessing import available_engines

logger = logging.getLogger(__name__)


def cmd_serve(args: argparse.Namespace) -> int:
    """Launch the API server."""
    from web import main

    serve_argv = ["--host", args.host, "--port", str(args.port)]
    if args.engine:
        serve_argv += ["--engine", args.engine]
    if args.decoder:
        serve_argv += ["--decoder", args.decoder]
    if args.log_level:
        serve_argv += ["--log-level", args.log_level]
    serve_argv += ["-v"] * args.verbose + ["-q"] * args.quiet
    return main(serve_argv)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="barscan",
        description="Barcode Scanner - decode barcodes and QR codes in images",
    )
    add_logging_args(parser)
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    serve_parser = subparsers.add_parser(
        "serve",
        help=f"Launch the scan API (port {config.SERVER_PORT})",
    )
    serve_parser.add_argument("--host", default=config.SERVER_HOST)
    serve_parser.add_argument("--port", type=int, default=config.SERVER_PORT)
    serve_parser.add_argument("--engine", choices=available_engines(), help="Image engine override")
    serve_parser.add_argument("--decoder", choices=available_decoders(), help="Decoder override")
    serve_parser.set_defaults(_cmd=cmd_serve)

    add_scan_subparser(subparsers)
    add_strategies_subparser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.verbose, args.quiet)

    handler = getattr(args, "_cmd", None)
    if handler is None:
        parser.print_help()
        return 1
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
