"""Constants for atomic output writes."""

from __future__ import annotations

CSS_TEMP_PREFIX: str = ".unogen-"
CSS_TEMP_SUFFIX: str = ".css.tmp"
REPORT_TEMP_PREFIX: str = ".unogen-report-"
REPORT_TEMP_SUFFIX: str = ".json.tmp"
