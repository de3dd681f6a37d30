from __future__ import annotations

import argparse
import asyncio
import datetime as dt
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .config import DEFAULT_CONFIG_PATH, LayoutConfig, read_config_file
from .engine import LayoutEngine
from .errors import ConfigError, FourDError
from .export.snapshot import build_snapshot, write_snapshot
from .scheduler.loop import LayoutLoop
from .sources import load_source

logger = logging.getLogger(__name__)

RESERVED_RECORD_KEYS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
    }
)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        created = dt.datetime.fromtimestamp(record.created, tz=dt.timezone.utc)
        payload = {
            "time": created.strftime("%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        for key, value in record.__dict__.items():
            if key in RESERVED_RECORD_KEYS:
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(log_dir: Optional[Path], level: int = logging.INFO) -> None:
    formatter = JsonFormatter()
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = []
    root.addHandler(console_handler)
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / "fourd.log", encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


def _resolve(args: argparse.Namespace) -> Dict[str, Any]:
    raw = read_config_file(Path(args.config) if args.config else DEFAULT_CONFIG_PATH)
    config = LayoutConfig.from_mapping(raw)
    seed = getattr(args, "seed", None)
    if seed is not None:
        config = config.replace(seed=seed)
    fps = getattr(args, "fps", None)
    fps = float(fps if fps is not None else raw.get("fps", 60))
    if not fps > 0:
        raise ConfigError(f"fps must be positive, got {fps}")
    return {
        "config": config,
        "logs_dir": raw.get("logs_dir"),
        "fps": fps,
    }


def run_command(args: argparse.Namespace) -> None:
    resolved = _resolve(args)
    config: LayoutConfig = resolved["config"]
    logs_dir = resolved["logs_dir"]
    setup_logging(Path(logs_dir) if logs_dir else None, logging.DEBUG if args.verbose else logging.INFO)

    engine = LayoutEngine(config)
    if args.source:
        with engine.locked() as graph:
            load_source(graph, args.source)

    if args.loop:
        frames = asyncio.run(LayoutLoop(engine, resolved["fps"]).run(frames=args.steps))
    else:
        for _ in range(args.steps):
            engine.step()
        frames = args.steps

    if args.verbose:
        engine.graph.check_invariants()
    center = engine.center_of_mass
    logger.info(
        "layout-run",
        extra={
            "frames": frames,
            "graph": str(engine),
            "center_of_mass": [round(float(c), 6) for c in center],
        },
    )
    if args.out:
        write_snapshot(args.out, build_snapshot(engine))


def validate_command(args: argparse.Namespace) -> None:
    resolved = _resolve(args)
    document = resolved["config"].to_dict()
    document["logs_dir"] = resolved["logs_dir"]
    document["fps"] = resolved["fps"]
    print(yaml.safe_dump(document, sort_keys=False))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="fourd 3D force-directed graph layout")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Lay out a graph")
    run_parser.add_argument("--config", default=None, help="YAML config file (defaults to the bundled config.yml)")
    run_parser.add_argument("--source", default=None, help="Graph source: a .py file or a .json elements file")
    run_parser.add_argument("--steps", type=int, default=100, help="Frames to simulate")
    run_parser.add_argument("--loop", action="store_true", help="Pace frames with the asyncio frame loop")
    run_parser.add_argument("--fps", type=float, default=None, help="Frame rate for --loop")
    run_parser.add_argument("--seed", type=int, default=None, help="Seed for initial vertex placement")
    run_parser.add_argument("--out", default=None, help="Write a JSON snapshot here when done")
    run_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging and invariant checks")
    run_parser.set_defaults(func=run_command)

    validate_parser = subparsers.add_parser("validate", help="Print the resolved configuration")
    validate_parser.add_argument("--config", default=None, help="YAML config file")
    validate_parser.set_defaults(func=validate_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except FourDError as exc:
        print(f"[fourd] {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
