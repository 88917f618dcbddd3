#!/usr/bin/env python3
"""
PG Finder - Main Entry Point

Fetches one month's sheet of PG listings, applies the chosen filters and
writes an HTML page of the beds that are still available.

Usage:
    python main.py                                  # All available beds
    python main.py --gender Female --filter AC      # Female PGs with AC
    python main.py --filter Double --filter Triple  # Double OR Triple sharing
    python main.py --select-all location            # Every location
    python main.py --sort-by-vacating-date          # Latest vacating date first
    python main.py --demo                           # Sample data (no API needed)
    python main.py --open                           # Open page in browser after generating

Environment Variables:
    PG_FINDER_API_BASE  - Base URL of the sheet API (default http://localhost:3000)
    PG_FINDER_SHEET     - Sheet to load (default Jul2025)
"""

import argparse
import logging
import os
import random
import webbrowser
from datetime import date, timedelta
from typing import Optional

from config import AppConfig
from dashboard_generator import generate_dashboard
from fetchers import Row, fetch_sheet
from filters import Gender, OptionGroup, UnknownFilterLabel, rule_for
from listing_view import ListingView

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)

CHECKBOX_GROUPS = [g.value for g in OptionGroup if g is not OptionGroup.GENDER]


def generate_demo_rows(seed: Optional[int] = None) -> list[Row]:
    """Generate realistic sample rows for trying the page without the sheet API."""
    rng = random.Random(seed)

    locations = [
        "Ghansoli", "CBD Belapur", "Kopar Khairane",
        "Nerul ( E )", "Nerul ( W )", "Vashi", "Sanpada",
    ]
    societies = [
        "Sai Krupa", "Shree Ganesh", "Om Residency", "Gokul Dham",
        "Sunshine Heights", "Laxmi Niwas", "Green Park",
    ]

    rows = []
    for i in range(40):
        vacating = date(2025, 7, 1) + timedelta(days=rng.randint(0, 90))
        rows.append({
            "PG ID": f"PG{101 + i}",
            "PG Name": f"{rng.choice(societies)} PG",
            "Location": rng.choice(locations),
            "Male / Female": rng.choice(["Male", "Female"]),
            "Sharing Type": rng.choice(["Private", "Double", "Triple", "Quad"]),
            "Ac / Non AC": rng.choice(["AC", "Non AC"]),
            "Attached Bathroom": rng.choice(["Yes", "No"]),
            "Rent": str(rng.randrange(6000, 18001, 500)),
            "Bed Available": rng.choice(["Yes", "Yes", "No"]),
            # Sheet dates are hand-typed; some are blank or free text
            "Client Vacating Date": rng.choice([
                vacating.isoformat(),
                vacating.strftime("%d/%m/%Y"),
                "",
                "TBD",
            ]),
        })
    return rows


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="PG Finder")
    parser.add_argument("--sheet", help="Sheet to load, e.g. Jul2025")
    parser.add_argument("--base-url", help="Base URL of the sheet API")
    parser.add_argument("--output-dir", help="Where to write the page and JSON")
    parser.add_argument("--gender", choices=[g.value for g in Gender], help="Only PGs for this gender")
    parser.add_argument(
        "--filter", dest="filters", action="append", default=[], metavar="LABEL",
        help="Filter option to switch on, e.g. AC, Double, Ghansoli (repeatable)",
    )
    parser.add_argument(
        "--select-all", dest="groups", action="append", default=[], choices=CHECKBOX_GROUPS,
        help="Switch on every option of a filter group (repeatable)",
    )
    parser.add_argument("--sort-by-vacating-date", action="store_true", help="Latest vacating date first")
    parser.add_argument("--demo", action="store_true", help="Use sample data (no API needed)")
    parser.add_argument("--open", action="store_true", help="Open page in browser after generating")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[list[str]] = None) -> str:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = AppConfig()
    if args.sheet:
        config.source.sheet = args.sheet
    if args.base_url:
        config.source.base_url = args.base_url
    if args.output_dir:
        config.output_dir = args.output_dir
    os.makedirs(config.output_dir, exist_ok=True)

    for label in args.filters:
        try:
            rule_for(label)
        except UnknownFilterLabel:
            parser.error(f"unknown filter option: {label!r}")

    view = ListingView(sheet=config.source.sheet)
    if args.demo:
        logger.info("Running in DEMO mode with sample data...")
        view.load(generate_demo_rows)
    else:
        logger.info(f"Loading sheet '{config.source.sheet}' from {config.source.endpoint}")
        view.load(lambda: fetch_sheet(config.source))

    view.set_gender(args.gender)
    for label in args.filters:
        if label not in view.selection.labels:
            view.toggle(label)
    for group in args.groups:
        view.select_group(OptionGroup(group))
    if args.sort_by_vacating_date:
        view.toggle_sort()

    if not view.show_content:
        logger.warning("No data loaded. The page will be empty.")
    else:
        logger.info(f"{view.filtered_total} of {len(view.rows)} listings match")

    html_path = generate_dashboard(view, config)
    logger.info(f"Page saved to: {html_path}")
    logger.info(f"JSON data saved to: {os.path.join(config.output_dir, config.data_filename)}")

    if args.open:
        webbrowser.open(f"file://{os.path.abspath(html_path)}")

    print(f"\n✅ Page ready: {html_path}")
    return html_path


if __name__ == "__main__":
    main()
