"""Real-time CLI dashboard for relay monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import write_cli_log, write_outbound_log

console = Console()


class RelayInfo:
    """Info about a single relayed call."""

    def __init__(self, relay_id: str, method: str, url: str, timestamp: datetime):
        self.relay_id = relay_id
        self.method = method
        self.url = url
        self.status: int | None = None
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing recent relay calls and errors."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._recent: list[RelayInfo] = []
        self._max_recent = 10
        self._request_count = {"relayed": 0, "completed": 0, "failed": 0}
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_relay(
        self,
        relay_id: str,
        method: str,
        url: str,
        headers: dict[str, str],
    ) -> None:
        """Log an outbound call about to be sent."""
        with self._lock:
            self._request_count["relayed"] += 1
            self._recent.insert(0, RelayInfo(relay_id, method, url, datetime.now()))
            self._recent = self._recent[: self._max_recent]

            if self.config.proxy.debug:
                write_outbound_log(method, url, headers)
            write_cli_log("RELAY", url, method=method, relay_id=relay_id)

            self._refresh()

    def log_outcome(self, relay_id: str, method: str, url: str, status: int) -> None:
        """Record the target's status on the row logged under relay_id."""
        with self._lock:
            self._request_count["completed"] += 1
            for info in self._recent:
                if info.relay_id == relay_id:
                    info.status = status
                    break
            write_cli_log("OUTCOME", url, method=method, status=status, relay_id=relay_id)
            self._refresh()

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            self._request_count["failed"] += 1
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{route} {status}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
            write_cli_log("ERROR", message[:200], route=route, status=status)

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_recent_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("HTTP Relay", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Mode: {self.config.relay.mode.value}", style="blue")
        stats.append("  |  ")
        stats.append(f"Relayed: {self._request_count['relayed']}", style="green")
        stats.append("  |  ")
        stats.append(f"Completed: {self._request_count['completed']}", style="green")
        stats.append("  |  ")
        stats.append(f"Failed: {self._request_count['failed']}", style="red")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_recent_panel(self) -> Panel:
        """Build the recent relay calls panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Method", width=7)
            table.add_column("URL", ratio=3)
            table.add_column("Status", width=6)

            for info in self._recent:
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    info.method,
                    info.url[:70] + "..." if len(info.url) > 70 else info.url,
                    self._format_status(info.status),
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Recent Relays[/blue]", border_style="blue")

    @staticmethod
    def _format_status(status: int | None) -> str:
        if status is None:
            return "[dim]…[/dim]"
        if status < 400:
            return f"[green]{status}[/green]"
        return f"[yellow]{status}[/yellow]"

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            content = Text(
                f"POST http://{self.config.proxy.host}:{self.config.proxy.port}"
                f"{self.config.proxy.path} with {{\"url\", \"method\", \"headers\", \"body\"}}",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")
