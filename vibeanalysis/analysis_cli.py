from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .api_models import parse_sample_batch
from .config import VALID_LOG_LEVELS, load_config
from .domain_models import Axis, Unit
from .errors import InvalidInputError
from .json_utils import safe_json_dumps
from .processing import SignalAnalyzer

LOGGER = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Analyze a raw accelerometer sample batch (JSON) and print the result"
    )
    parser.add_argument("input", type=Path, help="Input sample batch (.json)")
    parser.add_argument(
        "--unit",
        choices=[unit.value for unit in Unit],
        default=Unit.ACCELERATION_G.value,
        help="Unit of the processed series (default: acceleration_g)",
    )
    parser.add_argument(
        "--axis",
        action="append",
        choices=[axis.value for axis in Axis],
        default=None,
        help="Axis to analyze; repeat for several (default: all)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional YAML config overriding the defaults",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the JSON result here instead of stdout",
    )
    parser.add_argument(
        "--summary-only",
        action="store_true",
        help="Omit time series and spectrum arrays from the output",
    )
    parser.add_argument(
        "--log-level",
        choices=VALID_LOG_LEVELS,
        default=None,
        help="Override the configured log level",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        config = load_config(args.config)
    except (OSError, ValueError) as exc:
        print(f"Error: invalid config: {exc}", file=sys.stderr)
        return 1
    logging.basicConfig(
        level=args.log_level or config.logging.level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.input.exists():
        print(f"Error: input file not found: {args.input}", file=sys.stderr)
        return 1
    try:
        payload = json.loads(args.input.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        print(f"Error: input file contains invalid JSON: {exc}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as exc:
        print(f"Error: cannot read input file {args.input}: {exc}", file=sys.stderr)
        return 1

    analyzer = SignalAnalyzer(config.analysis_settings())
    try:
        batch = parse_sample_batch(payload, calibration=config.calibration_config())
        result = analyzer.analyze(batch, Unit(args.unit), axes=args.axis)
    except InvalidInputError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    text = safe_json_dumps(result.to_dict(include_series=not args.summary_only), indent=2)
    if args.output is None:
        print(text)
        return 0
    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(text + "\n", encoding="utf-8")
    LOGGER.info("wrote result: %s", args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
