"""Pure OCR transformation helpers: raw detections -> ordered text lines."""

from typing import Any

MIN_CONFIDENCE = 0.7  # Drop detections the OCR engine was unsure about
MIN_TEXT_LENGTH = 2  # Drop single-character noise like stray punctuation
MIN_Y_OVERLAP_RATIO = 0.5


def _boxes_overlap_y(det1: dict, det2: dict, min_overlap_ratio: float = MIN_Y_OVERLAP_RATIO) -> bool:
    """
    Check if two detection boxes overlap in Y-axis by at least min_overlap_ratio.

    The ratio is taken against the shorter box, so a tall item name and a
    short price on the same printed row still pair up.
    """
    overlap_start = max(det1["y_min"], det2["y_min"])
    overlap_end = min(det1["y_max"], det2["y_max"])

    if overlap_start >= overlap_end:
        return False

    overlap = overlap_end - overlap_start
    smaller_height = min(det1["y_max"] - det1["y_min"], det2["y_max"] - det2["y_min"])

    # Avoid division by zero for degenerate boxes
    if smaller_height <= 0:
        return False

    return overlap / smaller_height >= min_overlap_ratio


def _detection_data(detections: list[Any]) -> list[dict[str, Any]]:
    """Flatten raw ``[bbox, [text, confidence]]`` detections, filtering noise."""
    detection_data = []
    for detection in detections:
        bbox, (text, confidence) = detection
        if confidence < MIN_CONFIDENCE:
            continue
        if len(text.strip()) < MIN_TEXT_LENGTH:
            continue

        y_coords = [point[1] for point in bbox]
        detection_data.append(
            {
                "text": text.strip(),
                "y_min": min(y_coords),
                "y_max": max(y_coords),
                "center_y": sum(y_coords) / len(y_coords),
                "min_x": min(point[0] for point in bbox),
            }
        )
    return detection_data


def _group_detections_into_rows(detection_data: list[dict[str, Any]]) -> list[list[dict[str, Any]]]:
    """Group detections that share a printed row, top to bottom."""
    rows: list[list[dict[str, Any]]] = []
    for det in sorted(detection_data, key=lambda d: (d["center_y"], d["min_x"])):
        target = None
        for row in rows:
            if any(_boxes_overlap_y(det, other) for other in row):
                target = row
                break
        if target is None:
            rows.append([det])
        else:
            target.append(det)

    for row in rows:
        row.sort(key=lambda d: d["min_x"])
    rows.sort(key=lambda row: sum(d["center_y"] for d in row) / len(row))
    return rows


def transform_ocr_result(raw_result: dict[str, Any]) -> list[str]:
    """
    Transform a raw OCR service result into ordered text lines.

    Position data is used only to put words back into reading order; the
    returned lines carry none of it.

    Args:
        raw_result: ``{"detections": [[bbox, [text, confidence]], ...], ...}``

    Returns:
        One string per printed row, top to bottom
    """
    detections = raw_result.get("detections") or []
    rows = _group_detections_into_rows(_detection_data(detections))
    return [" ".join(det["text"] for det in row) for row in rows]
