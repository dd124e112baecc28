"""Shared file I/O helpers."""

from .files import read_text_file, write_json_atomic, write_text_atomic

__all__ = ["read_text_file", "write_json_atomic", "write_text_atomic"]
