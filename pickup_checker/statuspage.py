import html
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from aiohttp import web


class CycleOutcome(Enum):
    OK = "OK"
    NETWORK_ERROR = "NETWORK_ERROR"
    DECODE_ERROR = "DECODE_ERROR"


@dataclass(frozen=True)
class RecordStatus:
    store_name: str
    product_title: str
    pickup_quote: str
    in_stock: bool


@dataclass
class CycleReport:
    started_at: datetime
    outcome: CycleOutcome = CycleOutcome.OK
    records: list[RecordStatus] = field(default_factory=list)
    message_count: int = 0
    error: str = ""


class StatusBoard:
    """Holds the report of the most recent cycle only."""

    def __init__(self) -> None:
        self.latest: CycleReport | None = None

    def publish(self, report: CycleReport) -> None:
        self.latest = report


OUTCOME_COLORS = {
    CycleOutcome.OK: "#2e7d32",
    CycleOutcome.NETWORK_ERROR: "#e65100",
    CycleOutcome.DECODE_ERROR: "#e65100",
}
IN_STOCK_COLOR = "#2e7d32"
OUT_OF_STOCK_COLOR = "#c62828"


def render_html(report: CycleReport | None) -> str:
    parts = [
        "<!DOCTYPE html>",
        "<html><head>",
        '<meta charset="utf-8">',
        '<meta http-equiv="refresh" content="30">',
        "<title>Pickup Checker Status</title>",
        "<style>",
        "body { font-family: sans-serif; margin: 2em; }",
        "table { border-collapse: collapse; margin-bottom: 2em; }",
        "th, td { border: 1px solid #ccc; padding: 0.5em 1em; text-align: left; }",
        "th { background: #f5f5f5; }",
        ".status { font-weight: bold; color: white; padding: 0.25em 0.75em; border-radius: 4px; }",
        "</style>",
        "</head><body>",
        "<h1>Pickup Checker Status</h1>",
    ]

    if report is None:
        parts.append("<p>No search has completed yet.</p>")
    else:
        color = OUTCOME_COLORS.get(report.outcome, "#9e9e9e")
        parts.append(
            f"<p>Last search: {report.started_at.strftime('%Y-%m-%d %H:%M:%S')} "
            f'<span class="status" style="background:{color}">'
            f"{html.escape(report.outcome.value)}</span></p>"
        )
        if report.error:
            parts.append(f"<p>{html.escape(report.error)}</p>")
        parts.append(f"<p>In-stock messages: {report.message_count}</p>")

        if report.records:
            parts.append("<table>")
            parts.append(
                "<tr><th>Store</th><th>Model</th><th>Pickup Quote</th><th>Status</th></tr>"
            )
            for r in report.records:
                label, color = ("IN_STOCK", IN_STOCK_COLOR) if r.in_stock else ("OUT_OF_STOCK", OUT_OF_STOCK_COLOR)
                parts.append(
                    f"<tr>"
                    f"<td>{html.escape(r.store_name)}</td>"
                    f"<td>{html.escape(r.product_title)}</td>"
                    f"<td>{html.escape(r.pickup_quote)}</td>"
                    f'<td><span class="status" style="background:{color}">{label}</span></td>'
                    f"</tr>"
                )
            parts.append("</table>")
        elif report.outcome == CycleOutcome.OK:
            parts.append("<p>No stores returned.</p>")

    parts.append("</body></html>")
    return "\n".join(parts)


async def handle_index(request: web.Request) -> web.Response:
    board: StatusBoard = request.app["board"]
    return web.Response(text=render_html(board.latest), content_type="text/html")


async def start_status_server(
    board: StatusBoard, host: str = "127.0.0.1", port: int = 8080
) -> web.AppRunner:
    app = web.Application()
    app["board"] = board
    app.router.add_get("/", handle_index)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    return runner
