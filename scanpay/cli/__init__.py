"""Unified command-line interface for Scan & Pay.

Usage:
    scanpay parse <file|->
    scanpay scan <image> [--ocr-url URL] [--json]
    scanpay split <file> --person NAME=1,2 [--person NAME=3]
    scanpay serve [--host] [--port]
"""
