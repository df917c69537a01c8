"""Server-rendered HTML table of stored repair submissions."""

from datetime import datetime
from html import escape

PAGE_STYLE = """
    body{font-family:Arial,Helvetica,sans-serif;padding:20px;background:#f7f9fc}
    h2{margin:0 0 10px}
    table{border-collapse:collapse;width:100%;margin-top:10px}
    th,td{border:1px solid #ddd;padding:8px;text-align:left;vertical-align:top}
    th{background:#e3f2fd}
    tr:nth-child(even){background:#fafafa}
    code{background:#eef;padding:2px 4px;border-radius:4px}
"""

COLUMNS = ("Name", "Email", "Phone", "Model", "Priority", "Problem", "Image", "Date")

EMPTY_PAGE = '<h3 style="font-family:Arial">No submissions yet</h3>'
ERROR_PAGE = '<h3 style="font-family:Arial">Failed to read submissions</h3>'


def _text(value) -> str:
    return escape("" if value is None else str(value))


def _format_created_at(value) -> str:
    """Render an ISO timestamp as ``YYYY-MM-DD HH:MM:SS UTC``; pass others through."""
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return _text(value)
    return parsed.strftime("%Y-%m-%d %H:%M:%S UTC")


def _render_row(record: dict) -> str:
    image = record.get("image")
    image_cell = (
        f'<a href="{escape(str(image), quote=True)}" target="_blank">View</a>'
        if image
        else "&mdash;"
    )
    cells = [
        _text(record.get("name")),
        _text(record.get("email")),
        _text(record.get("phone")),
        _text(record.get("deviceModel")),
        _text(record.get("priority")),
        _text(record.get("problemDescription")),
        image_cell,
        _format_created_at(record.get("createdAt")),
    ]
    return "<tr>" + "".join(f"<td>{cell}</td>" for cell in cells) + "</tr>"


def render_submissions_table(records: list[dict]) -> str:
    """Render records (in the given order) as a standalone HTML page."""
    if not records:
        return EMPTY_PAGE

    header = "".join(f"<th>{column}</th>" for column in COLUMNS)
    rows = "\n".join(_render_row(record) for record in records)
    return (
        "<html>\n<head><title>Submissions</title>\n"
        '<meta name="viewport" content="width=device-width, initial-scale=1"/>\n'
        f"<style>{PAGE_STYLE}</style></head>\n<body>\n"
        "<h2>Repair Request Submissions</h2>\n"
        "<p>API source: <code>/submissions</code></p>\n"
        f"<table>\n<tr>{header}</tr>\n{rows}\n</table>\n"
        "</body></html>"
    )
