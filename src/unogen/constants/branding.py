"""Branding constants for terminal output."""

from __future__ import annotations

BRAND_NAME: str = "UNOGEN"
ASCII_LOGO_LINES: tuple[str, ...] = (
    ">_ UNOGEN",
    "     // on-demand atomic css",
)
CLI_DESCRIPTION: str = "\n".join((*ASCII_LOGO_LINES, "", f"{BRAND_NAME} utility compiler"))
