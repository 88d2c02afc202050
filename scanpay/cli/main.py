#!/usr/bin/env python3

import argparse
from collections.abc import Sequence

from scanpay.runtime import LOG_LEVELS, configure_logging, set_log_level


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Scan & Pay receipt splitting CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  parse <file|->             Parse recognized receipt lines (one per line)
  scan <image>               Scan a receipt image through the OCR service
  split <file> --person NAME=1,2 ...
                             Split a receipt between people by item number
  serve [--host] [--port]    Start the scan and split server
""",
    )
    parser.add_argument(
        "--log-level",
        choices=sorted(LOG_LEVELS),
        type=str.upper,
        help="Override SCANPAY_LOG_LEVEL for this run",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # parse command
    parse_parser = subparsers.add_parser("parse", help="Parse recognized receipt lines")
    parse_parser.add_argument("file", help="Text file with one recognized line per row ('-' for stdin)")
    parse_parser.add_argument("--json", action="store_true", help="Print the receipt as JSON")

    # scan command
    scan_parser = subparsers.add_parser("scan", help="Scan a receipt image")
    scan_parser.add_argument("image", help="Path to receipt image")
    scan_parser.add_argument(
        "--ocr-url", default="http://localhost:8001", help="OCR service URL (default: http://localhost:8001)"
    )
    scan_parser.add_argument("--json", action="store_true", help="Print the receipt as JSON")

    # split command
    split_parser = subparsers.add_parser("split", help="Split a receipt between people")
    split_parser.add_argument("file", help="Text file with one recognized line per row ('-' for stdin)")
    split_parser.add_argument(
        "--person",
        action="append",
        required=True,
        metavar="NAME=ITEMS",
        help="Person and the 1-based item numbers they had, e.g. Ana=1,3 (repeatable)",
    )
    split_parser.add_argument("--json", action="store_true", help="Print the split as JSON")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Start the scan and split server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port to bind to (default: 8080)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    configure_logging()
    if args.log_level:
        set_log_level(args.log_level)

    if args.command == "parse":
        from scanpay.cli.receipt import cmd_parse

        return cmd_parse(args)
    elif args.command == "scan":
        from scanpay.cli.receipt import cmd_scan

        return cmd_scan(args)
    elif args.command == "split":
        from scanpay.cli.receipt import cmd_split

        return cmd_split(args)
    elif args.command == "serve":
        from scanpay.cli.receipt import cmd_serve

        return cmd_serve(args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
