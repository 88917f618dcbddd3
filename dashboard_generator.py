"""
Generates a self-contained HTML page from the listing view.
The page is a single file with all CSS inline; rows are rendered as a table.
"""

import json
import logging
import os
from datetime import datetime, timezone
from html import escape

from config import AppConfig
from fetchers import Row
from filters import OptionGroup, active_filter_summary
from listing_view import ListingView

logger = logging.getLogger(__name__)

EMPTY_MESSAGE = "No records found for selected filters."


def generate_dashboard(view: ListingView, config: AppConfig) -> str:
    """Generate HTML page and JSON snapshot in the output directory."""

    os.makedirs(config.output_dir, exist_ok=True)
    rows = view.visible_rows
    selection = view.selection

    # Also save raw JSON
    json_path = os.path.join(config.output_dir, config.data_filename)
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump({
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "sheet": view.sheet,
            "selection": {
                "gender": selection.gender.value if selection.gender else None,
                "filters": sorted(selection.labels),
                "sort_by_vacating_date": selection.sort_by_vacating_date,
            },
            "total_rows": len(view.rows),
            "visible_rows": len(rows),
            "rows": rows,
        }, f, indent=2, ensure_ascii=False)

    now = datetime.now().strftime("%B %d, %Y at %I:%M %p")
    html = _build_html(view, rows, now, config)

    html_path = os.path.join(config.output_dir, config.dashboard_filename)
    with open(html_path, "w", encoding="utf-8") as f:
        f.write(html)

    logger.info(f"Rendered {len(rows)} of {len(view.rows)} rows")
    return html_path


def _render_options(view: ListingView) -> str:
    """One box per filter popup, with the picked options marked."""
    selection = view.selection
    boxes = []
    for group, labels in view.options.items():
        items = []
        for label in labels:
            if group is OptionGroup.GENDER:
                on = selection.gender is not None and selection.gender.value == label
            else:
                on = label in selection.labels
            items.append(f'<li class="{"on" if on else ""}">{escape(label)}</li>')
        boxes.append(
            f'<div class="popup"><h2>{escape(group.title)} Filter</h2>'
            f'<ul>{"".join(items)}</ul></div>'
        )
    return "".join(boxes)


def _render_chips(view: ListingView) -> str:
    chips = active_filter_summary(view.selection)
    if view.selection.sort_by_vacating_date:
        chips.append(("sort", "Sorted by vacating date"))
    return "".join(f'<span class="chip">{escape(text)}</span>' for _, text in chips)


def _render_table(rows: list[Row]) -> str:
    if not rows:
        return f'<p class="empty">{EMPTY_MESSAGE}</p>'

    # Column order follows the first visible row, as the sheet does
    columns = list(rows[0].keys())
    head = "".join(f"<th>{escape(c)}</th>" for c in columns)
    body = "".join(
        "<tr>" + "".join(f"<td>{escape(str(row.get(c, '')))}</td>" for c in columns) + "</tr>"
        for row in rows
    )
    return f"""<div class="panel">
  <div class="scroll">
    <table>
      <thead><tr>{head}</tr></thead>
      <tbody>{body}</tbody>
    </table>
  </div>
</div>"""


def _build_html(view: ListingView, rows: list[Row], generated_at: str, config: AppConfig) -> str:
    if view.show_content:
        controls = f'<div class="controls">{_render_options(view)}</div>'
        content = _render_table(rows)
    else:
        controls = ""
        content = ""

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{escape(config.page_title)} - {escape(view.sheet)}</title>
<style>
  :root {{
    --bg:      #f3f4f6;
    --surface: #ffffff;
    --accent:  #ea580c;
    --head:    #fdba74;
    --text:    #1f2937;
    --text2:   #6b7280;
    --border:  #d1d5db;
  }}

  * {{ margin:0; padding:0; box-sizing:border-box; }}

  body {{
    font-family: system-ui, sans-serif;
    background: var(--bg);
    color: var(--text);
    padding: 1.5rem;
  }}

  /* ── Header ────────────────────────────── */
  .header {{
    display: flex;
    align-items: center;
    justify-content: space-between;
    margin-bottom: 1rem;
  }}
  .header img {{ width: 300px; }}
  .header .meta {{ font-size: 0.8rem; color: var(--text2); text-align: right; }}

  /* ── Filters ───────────────────────────── */
  .controls {{
    display: flex;
    flex-wrap: wrap;
    justify-content: center;
    gap: 0.75rem;
    margin-bottom: 1rem;
  }}
  .popup {{
    background: var(--surface);
    border: 1px solid var(--accent);
    border-radius: 8px;
    padding: 0.75rem 1rem;
    min-width: 12rem;
  }}
  .popup h2 {{
    font-size: 0.85rem;
    color: var(--accent);
    margin-bottom: 0.4rem;
  }}
  .popup ul {{ list-style: none; font-size: 0.85rem; }}
  .popup li::before {{ content: "\\2610  "; }}
  .popup li.on::before {{ content: "\\2611  "; color: var(--accent); }}

  .chips {{
    display: flex;
    flex-wrap: wrap;
    gap: 0.4rem;
    justify-content: center;
    margin-bottom: 0.75rem;
  }}
  .chip {{
    font-size: 0.75rem;
    padding: 0.2rem 0.6rem;
    border: 1px solid var(--accent);
    border-radius: 999px;
    color: var(--accent);
  }}
  .total {{ text-align: center; font-size: 1.5rem; margin-bottom: 1rem; }}

  /* ── Table ─────────────────────────────── */
  .panel {{
    background: var(--surface);
    padding: 1.5rem;
    border-radius: 16px;
    box-shadow: 0 8px 30px rgba(0,0,0,0.08);
  }}
  .scroll {{ overflow: auto; max-height: 600px; }}
  table {{ border-collapse: collapse; min-width: 100%; font-size: 0.9rem; }}
  th {{
    position: sticky;
    top: 0;
    background: var(--head);
    padding: 0.5rem 1rem;
    border: 1px solid var(--border);
    white-space: nowrap;
    text-align: left;
  }}
  td {{ padding: 0.6rem 1rem; border-bottom: 1px solid var(--border); vertical-align: top; }}
  tr:nth-child(even) td {{ background: #f9fafb; }}

  .empty {{ text-align: center; color: var(--text2); padding: 2.5rem 0; }}
</style>
</head>
<body>

<div class="header">
  <img src="{escape(config.logo_url)}" alt="Logo">
  <div class="meta">Sheet {escape(view.sheet)}<br>Generated {escape(generated_at)}</div>
</div>

{controls}
<div class="chips">{_render_chips(view)}</div>
<h1 class="total">{len(rows)}</h1>

{content}

</body>
</html>"""
