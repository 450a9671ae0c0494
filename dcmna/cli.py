"""Command line entry point.

    dcmna solve circuit.json        print the solved circuit as JSON
    dcmna serve --port 5000         run the HTTP service
"""

from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path

from .config import load_settings
from .errors import CircuitError, InvalidTopology
from .solver import simulate

logger = logging.getLogger(__name__)


def _load(source) -> dict:
    """Read a JSON payload from a path or '-' (stdin)."""
    try:
        if str(source) == "-":
            return json.load(sys.stdin)
        with Path(source).open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except json.JSONDecodeError as exc:
        raise InvalidTopology(f"{source} is not valid JSON: {exc}", "payload") from exc
    except OSError as exc:
        raise InvalidTopology(f"Cannot read {source}: {exc.strerror or exc}", "payload") from exc


def _solve(args) -> int:
    try:
        result = simulate(_load(args.circuit))
    except CircuitError as exc:
        print(json.dumps(exc.to_json(), indent=args.indent), file=sys.stderr)
        return 1

    print(json.dumps(result, indent=args.indent))
    return 0


def _serve(args) -> int:
    import uvicorn
    from .server import create_app

    settings = load_settings()
    settings = settings._replace(
        host=args.host or settings.host,
        port=args.port or settings.port,
    )
    logger.info("Serving on http://%s:%d", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port,
                log_level=settings.log_level.lower())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dcmna", description="DC circuit solver (Modified Nodal Analysis)")
    sub = parser.add_subparsers(dest="command", required=True)

    solve = sub.add_parser("solve", help="Solve a JSON circuit payload")
    solve.add_argument("circuit", type=Path, help="Path to circuit JSON ('-' for stdin)")
    solve.add_argument("--indent", type=int, default=2, help="JSON indentation")
    solve.set_defaults(func=_solve)

    serve = sub.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", help="Bind address (default DCMNA_HOST or 127.0.0.1)")
    serve.add_argument("--port", type=int, help="Port (default DCMNA_PORT or 5000)")
    serve.set_defaults(func=_serve)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=load_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
