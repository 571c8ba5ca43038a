from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


def _ensure_repo_root_on_path() -> None:
    """Ensure the repository root (parent of this package) is on ``sys.path``.

    When this module is executed as a script (``python reaction_trainer/__main__.py``)
    the package is not importable by name, so the parent directory of the package
    is inserted into ``sys.path``.
    """
    pkg_dir = Path(__file__).resolve().parent
    repo_root_str = str(pkg_dir.parent)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


try:
    # Works when executed as a module: python -m reaction_trainer
    from .app import run  # type: ignore[attr-defined]
    from .game import ReactionTestConfig  # type: ignore[attr-defined]
except ImportError:
    # Works when executed as a script (IDE "Run Python File", absolute path, etc.)
    _ensure_repo_root_on_path()
    from reaction_trainer.app import run  # type: ignore[attr-defined]
    from reaction_trainer.game import ReactionTestConfig  # type: ignore[attr-defined]


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="reaction_trainer", description="Two-element reaction test.")
    parser.add_argument("--seed", type=int, default=None, help="seed for the element state stream")
    parser.add_argument(
        "--auto-stop-s",
        type=float,
        default=ReactionTestConfig().auto_stop_ms / 1000.0,
        help="end the session after this many seconds",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point for running the trainer from the command line."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = ReactionTestConfig(auto_stop_ms=float(args.auto_stop_s) * 1000.0)
    return run(seed=args.seed, config=config)


if __name__ == "__main__":
    raise SystemExit(main())
