"""FastAPI server for scanning receipts and splitting the bill between people."""

import os
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from scanpay.application.receipts.scan import parse_lines
from scanpay.application.split import BillSplitter, UnknownPersonError
from scanpay.domain.receipt import Receipt
from scanpay.domain.split import Person
from scanpay.receipt.formatter import receipt_to_dict, split_to_dict
from scanpay.runtime.logging import get_logger
from scanpay.runtime.receipt_pipeline import RecognitionError, call_ocr_service_async

logger = get_logger(__name__)

OCR_SERVICE_URL = os.environ.get("OCR_SERVICE_URL", "http://localhost:8001")


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"status": "error", "message": message}, status_code=status_code)


def _splitter(request: Request) -> BillSplitter:
    return request.app.state.splitter


def _person_to_dict(person: Person) -> dict[str, str]:
    return {"id": person.id, "name": person.name, "color": person.color}


def _receipt_payload(splitter: BillSplitter, receipt: Receipt) -> dict[str, Any]:
    """Receipt JSON with each item's current assignees attached."""
    payload = receipt_to_dict(receipt)
    for item in payload["items"]:
        item["assignees"] = sorted(splitter.assignees(item["id"]))
    payload["status_message"] = receipt.status_message
    return payload


async def _json_body(request: Request) -> dict[str, Any] | None:
    """Decode a JSON object body; None for an empty body."""
    body = await request.body()
    if not body.strip():
        return None
    try:
        data = await request.json()
    except ValueError as exc:
        raise ValueError(f"Invalid JSON body: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("JSON body must be an object")
    return data


def create_app(splitter: BillSplitter | None = None) -> FastAPI:
    """Build the server around one shared BillSplitter."""
    app = FastAPI(title="Scan & Pay")
    app.state.splitter = splitter if splitter is not None else BillSplitter()

    @app.post("/receipts")
    async def submit_lines(request: Request) -> JSONResponse:
        """Parse already-recognized lines and make them the current receipt."""
        try:
            data = await _json_body(request)
        except ValueError as exc:
            return _error(str(exc), 400)
        lines = (data or {}).get("lines")
        if not isinstance(lines, list) or not all(isinstance(line, str) for line in lines):
            return _error("Expected {\"lines\": [string, ...]}", 400)

        splitter = _splitter(request)
        receipt = parse_lines(lines)
        splitter.replace_receipt(receipt)
        logger.info("Parsed %d submitted lines into %d items", len(lines), len(receipt.items))
        return JSONResponse(_receipt_payload(splitter, receipt))

    @app.post("/scan")
    async def scan_receipt(request: Request) -> JSONResponse:
        """Receive a receipt image, OCR it and make it the current receipt."""
        form = await request.form()

        file = None
        for key, value in form.items():
            logger.debug("Form field: key=%r, type=%s", key, type(value))
            if hasattr(value, "read"):
                file = value
                break

        if not file:
            return _error("No file found in request", 400)

        filename = getattr(file, "filename", None) or "receipt.jpg"
        content_type = getattr(file, "content_type", None) or "image/jpeg"
        contents = await file.read()

        try:
            lines = await call_ocr_service_async(contents, filename, OCR_SERVICE_URL, content_type)
        except RecognitionError as exc:
            logger.error("Recognition failed for %s: %s", filename, exc)
            return _error(str(exc), 502)

        splitter = _splitter(request)
        receipt = parse_lines(lines)
        splitter.replace_receipt(receipt)
        logger.info("Scanned %s: %d items, total %s", filename, len(receipt.items), receipt.grand_total)
        return JSONResponse(_receipt_payload(splitter, receipt))

    @app.get("/receipt")
    async def current_receipt(request: Request) -> JSONResponse:
        splitter = _splitter(request)
        receipt = splitter.receipt
        if receipt is None:
            return _error("No receipt has been scanned yet", 404)
        return JSONResponse(_receipt_payload(splitter, receipt))

    @app.get("/people")
    async def list_people(request: Request) -> JSONResponse:
        return JSONResponse(split_to_dict(_splitter(request)))

    @app.post("/people")
    async def add_person(request: Request) -> JSONResponse:
        try:
            data = await _json_body(request)
        except ValueError as exc:
            return _error(str(exc), 400)
        name = (data or {}).get("name")
        if name is not None and not isinstance(name, str):
            return _error("name must be a string", 400)
        person = _splitter(request).add_person(name.strip() if name else None)
        return JSONResponse(_person_to_dict(person), status_code=201)

    @app.patch("/people/{person_id}")
    async def rename_person(person_id: str, request: Request) -> JSONResponse:
        try:
            data = await _json_body(request)
        except ValueError as exc:
            return _error(str(exc), 400)
        name = (data or {}).get("name")
        if not isinstance(name, str):
            return _error("name must be a string", 400)
        try:
            person = _splitter(request).rename_person(person_id, name)
        except UnknownPersonError:
            return _error(f"Unknown person: {person_id}", 404)
        except ValueError as exc:
            return _error(str(exc), 400)
        return JSONResponse(_person_to_dict(person))

    @app.delete("/people/{person_id}")
    async def remove_person(person_id: str, request: Request) -> JSONResponse:
        removed = _splitter(request).remove_person(person_id)
        return JSONResponse({"removed": removed})

    @app.post("/items/{item_id}/toggle/{person_id}")
    async def toggle_assignment(item_id: str, person_id: str, request: Request) -> JSONResponse:
        splitter = _splitter(request)
        try:
            assigned = splitter.toggle_assignment(item_id, person_id)
        except UnknownPersonError:
            return _error(f"Unknown person: {person_id}", 404)
        return JSONResponse(
            {
                "item_id": item_id,
                "person_id": person_id,
                "assigned": assigned,
                "assignees": sorted(splitter.assignees(item_id)),
            }
        )

    @app.get("/totals")
    async def totals(request: Request) -> JSONResponse:
        splitter = _splitter(request)
        payload = split_to_dict(splitter)
        payload["unassigned"] = [item.id for item in splitter.unassigned_items()]
        return JSONResponse(payload)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
