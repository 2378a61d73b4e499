"""Scan command CLI parsing and control flow."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from errors import EngineUnavailable, NoCodeDetected
from preprocessing import available_engines
from decoding import available_decoders
from scan import build_orchestrator, scan_path

logger = logging.getLogger(__name__)


def add_scan_subparser(subparsers: argparse._SubParsersAction) -> None:
    scan_parser = subparsers.add_parser(
        "scan",
        help="Decode a barcode or QR code in a local image file",
    )
    scan_parser.add_argument(
        "image",
        help="Path to the image file",
    )
    scan_parser.add_argument(
        "--engine",
        choices=available_engines(),
        default=None,
        help="Image engine for preprocessing (default: from config)",
    )
    scan_parser.add_argument(
        "--decoder",
        choices=available_decoders(),
        default=None,
        help="Decoder backend (default: from config)",
    )
    scan_parser.add_argument(
        "--show-method",
        action="store_true",
        help="Include the method that produced the result in the output",
    )
    scan_parser.set_defaults(_cmd=cmd_scan)


def cmd_scan(args: argparse.Namespace) -> int:
    orchestrator = build_orchestrator(args.engine, args.decoder)
    try:
        outcome = scan_path(args.image, orchestrator)
    except FileNotFoundError as exc:
        logger.error("%s", exc)
        return 1
    except NoCodeDetected as exc:
        logger.error("%s", exc)
        return 2
    except EngineUnavailable as exc:
        logger.error("%s", exc)
        return 3

    payload = outcome.result.to_dict()
    if args.show_method:
        payload["method"] = outcome.method
    json.dump(payload, sys.stdout)
    sys.stdout.write("\n")
    logger.info("Decoded using %s", outcome.method)
    return 0
