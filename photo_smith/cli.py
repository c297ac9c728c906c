from __future__ import annotations

import argparse
import logging
import re
import signal
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from . import engine
from .config import EngineSettings
from .errors import InvalidParameterError, PhotoSmithError
from .session import EditorSession

logger = logging.getLogger("photo_smith")

SIZE_RE = re.compile(r"^(\d+)x(\d+)$")
GEOMETRY_RE = re.compile(r"^(\d+)x(\d+)\+(-?\d+)\+(-?\d+)$")
HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CANCELLED = 130


def setup_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s", "%H:%M:%S"))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))


def parse_size(text: str) -> Tuple[int, int]:
    match = SIZE_RE.match(text.strip())
    if not match:
        raise InvalidParameterError(f"Invalid size: {text} (expected WIDTHxHEIGHT)")
    width, height = (int(value) for value in match.groups())
    return width, height


def parse_geometry(text: str) -> Tuple[int, int, int, int]:
    match = GEOMETRY_RE.match(text.strip())
    if not match:
        raise InvalidParameterError(f"Invalid geometry: {text} (expected WIDTHxHEIGHT+LEFT+TOP)")
    width, height, x, y = (int(value) for value in match.groups())
    return width, height, x, y


def parse_color(text: str) -> Tuple[int, int, int]:
    """Accepts ``#rrggbb`` or ``r/g/b``."""
    text = text.strip()
    match = HEX_COLOR_RE.match(text)
    if match:
        value = match.group(1)
        return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)
    parts = text.split("/")
    if len(parts) != 3:
        raise InvalidParameterError(f"Invalid color: {text} (expected #rrggbb or r/g/b)")
    try:
        r, g, b = (int(part) for part in parts)
    except ValueError:
        raise InvalidParameterError(f"Invalid color: {text}") from None
    return r, g, b


def parse_step(text: str) -> Tuple[str, Dict[str, str]]:
    """Split ``"key:name=value,name=value"`` into the operation key and raw parameters."""
    key, _, rest = text.partition(":")
    params: Dict[str, str] = {}
    for item in filter(None, (part.strip() for part in rest.split(","))):
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise InvalidParameterError(f"Invalid parameter {item!r} in step {text!r} (expected name=value)")
        params[name.strip().replace("-", "_")] = value.strip()
    return key.strip(), params


def convert_params(raw: Dict[str, str]) -> Dict[str, Any]:
    params: Dict[str, Any] = {}
    for name, value in raw.items():
        if name == "size":
            params["width"], params["height"] = parse_size(value)
        elif name == "rect":
            width, height, left, top = parse_geometry(value)
            params.update(left=left, top=top, width=width, height=height)
        elif name == "color":
            params["color"] = parse_color(value)
        else:
            params[name] = _scalar(value)
    return params


def _scalar(value: str) -> Any:
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            continue
    return value


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Apply a chain of PhotoSmith filters to an image.")
    parser.add_argument("input", nargs="?", help="Input image (PNG, JPEG, BMP or TGA)")
    parser.add_argument("-o", "--output", help="Output image (PNG, JPEG or BMP)")
    parser.add_argument(
        "-a",
        "--apply",
        action="append",
        default=[],
        metavar="STEP",
        help='Filter step, e.g. "grayscale", "blur:strength=40", "crop:rect=100x80+10+20". Repeatable.',
    )
    parser.add_argument("--list", action="store_true", help="List available operations and exit")
    parser.add_argument("--history-capacity", type=int, default=EngineSettings.history_capacity)
    parser.add_argument("--progress-interval", type=int, default=None, help="Report progress every N rows")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the TV/CRT noise")
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def _list_operations() -> None:
    for op in engine.OPERATIONS:
        kind = "cancelable" if op.cancelable else "immediate"
        print(f"{op.key:<16} {op.label:<18} {kind}")


def _log_progress(done: int, total: int) -> None:
    logger.debug("progress %d/%d", done, total)


def run(args: argparse.Namespace) -> int:
    settings = EngineSettings(history_capacity=args.history_capacity, progress_interval=args.progress_interval)
    session = EditorSession(settings, progress=_log_progress)
    session.load(args.input)

    previous = signal.signal(signal.SIGINT, lambda *_: session.cancel())
    try:
        for step in args.apply:
            key, raw = parse_step(step)
            if key == "merge":
                mode = raw.pop("mode", "overlap")
                other = raw.pop("with", None)
                if other is None:
                    raise InvalidParameterError("merge needs with=PATH")
                result = session.merge_with(other, mode)
            else:
                params = convert_params(raw)
                if key == "tv" and args.seed is not None:
                    params["rng"] = np.random.default_rng(args.seed)
                result = session.apply(key, **params)

            if result.cancelled:
                logger.warning(result.message)
                return EXIT_CANCELLED
            if result.failed:
                logger.error(result.message)
                return EXIT_FAILED
            logger.info(result.message)
    finally:
        signal.signal(signal.SIGINT, previous)

    if args.output:
        session.save(args.output)
    else:
        logger.info("No output path given; result not saved")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    setup_logging(args.log_level)
    if args.list:
        _list_operations()
        return EXIT_OK
    if not args.input:
        logger.error("An input image is required")
        return EXIT_FAILED
    try:
        return run(args)
    except PhotoSmithError as exc:
        logger.error("%s", exc)
        return EXIT_FAILED


if __name__ == "__main__":
    raise SystemExit(main())
