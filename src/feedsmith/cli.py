"""Command-line interface for FeedSmith."""

import argparse
import json
import logging
import sys
from pathlib import Path

import uvicorn

from .ops import OperationApplier
from .sheets.grid import dump_grid, load_grid


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="FeedSmith - AI-assisted product feed spreadsheet editor"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the web server")
    server_parser.add_argument(
        "--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)"
    )
    server_parser.add_argument(
        "--port", type=int, default=8000, help="Port to bind to (default: 8000)"
    )
    server_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    # Apply command
    apply_parser = subparsers.add_parser(
        "apply", help="Apply an operation batch file to a grid snapshot file"
    )
    apply_parser.add_argument("grid", type=Path, help="Grid snapshot (JSON)")
    apply_parser.add_argument(
        "operations", type=Path, help="Operation batch (JSON array or AI response object)"
    )
    apply_parser.add_argument(
        "--output", "-o", type=Path, help="Write the result here instead of stdout"
    )

    args = parser.parse_args()

    if args.command == "serve":
        run_server(args.host, args.port, args.reload)
    elif args.command == "apply":
        sys.exit(run_apply(args.grid, args.operations, args.output))
    else:
        parser.print_help()
        sys.exit(1)


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "feedsmith.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


def run_apply(grid_path: Path, operations_path: Path, output: Path = None) -> int:
    """Apply a batch offline and print or write the resulting grid."""
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    try:
        grid = load_grid(grid_path.read_text(encoding="utf-8"))
        payload = json.loads(operations_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    operations = payload.get("operations", []) if isinstance(payload, dict) else payload
    result = OperationApplier().apply_batch(grid, operations)
    text = dump_grid(result.grid, indent=2)

    if output:
        output.write_text(text, encoding="utf-8")
    else:
        print(text)
    print(f"Applied {result.applied} operations, skipped {result.skipped}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    main()
