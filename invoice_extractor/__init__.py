"""
Invoice Extractor - text extraction from single-stream PDF trip invoices.

The core pipeline isolates the invoice's only content stream, reverses its
ASCII85 encoding, inflates it with zlib and keeps the text literals. Outer
stages turn the accumulated text into a CSV table and a yearly summary.
"""

__version__ = "1.0.0"
__author__ = "Invoice Extractor"
