"""
Configuration for the PG Finder listing view.

The listings come from a spreadsheet-backed API that exposes one sheet per
month (e.g. "Jul2025"):

    GET <base_url>/google-sheet?sheet=<name>
"""

import os
from dataclasses import dataclass, field


@dataclass
class SheetSource:
    """Where the rows come from - set via environment variables or fill in directly."""
    base_url: str = os.getenv("PG_FINDER_API_BASE", "http://localhost:3000")
    sheet: str = os.getenv("PG_FINDER_SHEET", "Jul2025")
    timeout: int = 30  # seconds

    @property
    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/google-sheet"


@dataclass
class AppConfig:
    """Top-level configuration."""
    source: SheetSource = field(default_factory=SheetSource)

    # Output
    output_dir: str = os.path.expanduser("~/pg-finder/output")
    dashboard_filename: str = "pg_listings.html"
    data_filename: str = "pg_listings.json"

    # Page
    page_title: str = "PG Finder"
    logo_url: str = "https://gpgs.in/wp-content/themes/paying_guest/images/logo.png"
