"""
Shared helpers: logging setup, lenient time parsing, asset-ID resolution.
"""
