"""coursecraft: natural-language editing and streaming payload extraction for course outlines."""

from __future__ import annotations

__version__ = "0.1.0"
