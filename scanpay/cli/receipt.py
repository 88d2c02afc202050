"""Receipt command handlers used by the unified CLI."""

import argparse
import json
import sys
from pathlib import Path

from scanpay.runtime import get_logger

logger = get_logger(__name__)


def _read_lines(source: str) -> list[str]:
    """Read recognized lines from a text file, or stdin when source is ``-``."""
    if source == "-":
        return sys.stdin.read().splitlines()
    return Path(source).read_text(encoding="utf-8").splitlines()


def _parse_person_claim(claim: str) -> tuple[str, list[int]]:
    """
    Parse ``NAME=1,3`` into a name and 1-based item numbers.

    Raises:
        ValueError: if the claim has no name or a non-numeric item number.
    """
    name, sep, numbers = claim.partition("=")
    name = name.strip()
    if not name or not sep:
        raise ValueError(f"Expected NAME=ITEM[,ITEM...], got {claim!r}")
    indexes = []
    for part in numbers.split(","):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit():
            raise ValueError(f"Item numbers must be positive integers, got {part!r}")
        indexes.append(int(part))
    return name, indexes


def cmd_parse(args: argparse.Namespace) -> int:
    """Parse recognized receipt lines and print the result."""
    from scanpay.application.receipts.scan import parse_lines
    from scanpay.receipt.formatter import format_parsed_receipt, receipt_to_dict

    try:
        lines = _read_lines(args.file)
    except OSError as e:
        logger.error("Cannot read %s: %s", args.file, e)
        print(f"Error: cannot read {args.file}: {e}")
        return 1

    receipt = parse_lines(lines)
    if args.json:
        print(json.dumps(receipt_to_dict(receipt), indent=2))
    else:
        print(format_parsed_receipt(receipt), end="")
    return 0


def cmd_scan(args: argparse.Namespace) -> int:
    """Scan a receipt image through the OCR service and print the result."""
    from scanpay.application.receipts.scan import ReceiptScanRequest, run_receipt_scan
    from scanpay.receipt.formatter import format_parsed_receipt, receipt_to_dict

    result = run_receipt_scan(ReceiptScanRequest(image_path=Path(args.image), ocr_url=args.ocr_url))

    if result.status == "file_not_found":
        logger.error("%s", result.error)
        print(f"Error: {result.error}")
        return 1

    if result.status == "recognition_failed":
        logger.error("%s", result.error)
        print(f"OCR service unavailable: {result.error}")
        print("Make sure the OCR service is running before scanning receipts.")
        return 1

    receipt = result.receipt
    if receipt is None:
        print("Scan failed: missing receipt output.")
        return 1

    if args.json:
        print(json.dumps(receipt_to_dict(receipt), indent=2))
    else:
        print(format_parsed_receipt(receipt), end="")
    return 0


def cmd_split(args: argparse.Namespace) -> int:
    """Parse a receipt, assign items to people and print what each owes."""
    from scanpay.application.receipts.scan import parse_lines
    from scanpay.application.split import BillSplitter
    from scanpay.receipt.formatter import format_split_summary, split_to_dict

    try:
        lines = _read_lines(args.file)
        claims = [_parse_person_claim(claim) for claim in args.person]
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    receipt = parse_lines(lines)
    if not receipt.items:
        print(receipt.status_message)
        return 1

    splitter = BillSplitter(receipt)
    first = splitter.people[0]
    for position, (name, indexes) in enumerate(claims):
        if position == 0:
            person = splitter.rename_person(first.id, name)
        else:
            person = splitter.add_person(name)
        for index in indexes:
            if index < 1 or index > len(receipt.items):
                print(f"Error: item {index} does not exist (receipt has {len(receipt.items)} items)")
                return 1
            item = receipt.items[index - 1]
            if person.id not in splitter.assignees(item.id):
                splitter.toggle_assignment(item.id, person.id)

    if args.json:
        print(json.dumps(split_to_dict(splitter), indent=2))
    else:
        for i, item in enumerate(receipt.items, 1):
            print(f"  {i}. {item.name} - ${item.price:.2f}")
        print(format_split_summary(splitter), end="")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the FastAPI server for scanning and splitting."""
    import uvicorn

    from scanpay.runtime import receipt_server as server

    print(f"Starting Scan & Pay server on {args.host}:{args.port}")
    print(f"Scan endpoint: http://{args.host}:{args.port}/scan")
    print("Press Ctrl+C to stop")

    uvicorn.run(server.app, host=args.host, port=args.port)
    return 0
