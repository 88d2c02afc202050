"""Receipt parsing: OCR lines -> structured Receipt."""
