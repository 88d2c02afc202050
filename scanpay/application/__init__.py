"""Application workflows: scanning receipts and splitting bills."""
