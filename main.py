from __future__ import annotations

import argparse
import sys
import time
from dataclasses import replace
from pathlib import Path

from mandelfield.config import load_config, validate_config
from mandelfield.errors import MandelfieldError
from mandelfield.execution import BACKENDS, run_palette, run_render


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Generate an escape-time fractal image.")
    parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Config JSON/YAML file to use. Output will be at <config path>.png",
    )
    parser.add_argument(
        "--output-palette",
        action="store_true",
        help="Write 100px squares of the configured colors to <config name>-palette.png instead",
    )
    parser.add_argument("--output", type=str, help="Override the output image path")
    parser.add_argument("--workers", type=int, help="Worker thread count (default: config or CPU count)")
    parser.add_argument("--backend", choices=BACKENDS, default="threads", help="Parallel backend")
    parser.add_argument("--verbose", "-v", action="store_true", help="Print per-chunk progress")
    return parser.parse_args(argv)


def main(argv=None):
    start = time.perf_counter()
    args = parse_args(argv)

    config_path = Path(args.config)
    print(f"Getting config from {config_path}", flush=True)

    try:
        config = load_config(config_path)
        if args.workers is not None:
            config = replace(config, workers=args.workers)
        validate_config(config)
        print(f"[Timing] Bootstrap: {time.perf_counter() - start:.4f}s", flush=True)

        if args.output_palette:
            rc = run_palette(config, config_path, args.output)
        else:
            rc = run_render(
                config,
                config_path,
                output=args.output,
                backend=args.backend,
                verbose=args.verbose,
            )
    except MandelfieldError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    print(f"[Timing] Total: {time.perf_counter() - start:.4f}s", flush=True)
    return rc


if __name__ == "__main__":
    sys.exit(main())
