"""CLI for checking level files.

Usage::

    connex-check levels/*.txt

    # JSON levels, machine-readable report
    connex-check --json level.json

Text files (``.txt``) use the square text format; anything else is read as
JSON level data. Exits with status 1 when any file is malformed.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from connex.config import settings
from connex.engine.errors import LevelErrorReason, MalformedLevelError
from connex.engine.models import Level
from connex.puzzle.board import Board
from connex.puzzle.evaluator import evaluate
from connex.puzzle.levels import load_level, parse_level

logger = logging.getLogger(__name__)


def _read_level(path: Path) -> Level:
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".txt":
        return parse_level(text, name=path.stem)
    level = load_level(text)
    if level.name is None:
        level = level.model_copy(update={"name": path.stem})
    return level


def check_file(path: Path) -> dict:
    """Load and evaluate one level file."""
    try:
        level = _read_level(path)
        board = Board.from_level(level)
    except MalformedLevelError as e:
        logger.debug(f"{path}: {e.reason.value}")
        return {"path": str(path), "ok": False, "reason": e.reason.value, "error": e.message}
    except UnicodeDecodeError as e:
        logger.debug(f"{path}: not UTF-8")
        return {"path": str(path), "ok": False, "reason": LevelErrorReason.PARSE_ERROR.value, "error": str(e)}
    except OSError as e:
        logger.debug(f"{path}: {e}")
        return {"path": str(path), "ok": False, "reason": "unreadable_file", "error": str(e)}

    evaluation = evaluate(board.snapshot())
    return {
        "path": str(path),
        "ok": True,
        "name": level.name,
        "topology": level.topology,
        "width": level.width,
        "height": level.height,
        "solved": evaluation.solved,
        "dangling": len(evaluation.dangling),
        "components": evaluation.components,
    }


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Check connex level files")
    parser.add_argument("files", nargs="+", type=Path, help="Level files to check")
    parser.add_argument("--json", action="store_true", help="Print a JSON report")
    parser.add_argument("--log-level", default=settings.log_level)
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper())

    results = []
    for path in args.files:
        if not path.is_file():
            results.append({"path": str(path), "ok": False, "reason": "missing_file", "error": "No such file"})
            continue
        results.append(check_file(path))

    if args.json:
        print(json.dumps(results, indent=2))
    else:
        for r in results:
            if r["ok"]:
                state = "solved" if r["solved"] else f"unsolved ({r['dangling']} dangling, {r['components']} groups)"
                print(f"{r['path']}: {r['height']}x{r['width']} {r['topology']}, {state}")
            else:
                print(f"{r['path']}: malformed ({r['reason']}): {r['error']}", file=sys.stderr)

    if not all(r["ok"] for r in results):
        sys.exit(1)


if __name__ == "__main__":
    main()
