"""Strategies command: show the attempt order and each strategy's engine arguments."""

from __future__ import annotations

import argparse

from preprocessing import STRATEGY_CATALOG, magick_args, manual_rotation
from scan import ScanOrchestrator


def add_strategies_subparser(subparsers: argparse._SubParsersAction) -> None:
    strategies_parser = subparsers.add_parser(
        "strategies",
        help="List preprocessing strategies in the order they are tried",
    )
    strategies_parser.set_defaults(_cmd=cmd_strategies)


def cmd_strategies(args: argparse.Namespace) -> int:
    # Engine and decoder are not used for planning
    orchestrator = ScanOrchestrator(engine=None, decoder=None)
    by_name = {strategy.name: strategy for strategy in STRATEGY_CATALOG}
    by_name.update(
        (rotation.name, rotation)
        for rotation in (manual_rotation(angle) for angle in orchestrator.rotation_angles)
    )

    for position, method in enumerate(orchestrator.plan(), start=1):
        strategy = by_name.get(method)
        if strategy is None:
            print(f"{position:2d}. {method}")
            continue
        args_text = " ".join(magick_args(strategy.operations))
        print(f"{position:2d}. {method:<28} [{strategy.strategy_class.value}] {args_text}")
    return 0
