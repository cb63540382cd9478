"""
Scorecard Agent - Parse a unit scorecard workbook and print the ranking

Usage:
    scorecard "Scorecard Enero.xlsx" --mode normalized --type restaurant
    scorecard book.xlsx --json scorecard.json --logs
"""

import argparse
import os
import sys
from datetime import datetime

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich import box

from scorecard.config import get_settings
from scorecard.models import ParsedScorecard
from scorecard.modules.logger import get_logger, setup_logging
from scorecard.modules.ranking import investment_tier, rank_units, summarize
from scorecard.modules.workbook_parser import WorkbookFormatError, parse_scorecard_workbook

console = Console()

LIGHT_STYLES = {"green": "green", "yellow": "yellow", "red": "red"}


def _pct(value: float, digits: int = 1) -> str:
    return f"{value * 100:.{digits}f}%"


class ScorecardAgent:
    """Loads one workbook and renders its ranking to the console."""

    def __init__(self, workbook_path: str, mode: str = "excel", unit_type: str = "all",
                 search: str = "", json_path: str = None, show_logs: bool = False,
                 log_dir: str = None):
        self.workbook_path = workbook_path
        self.mode = mode
        self.unit_type = unit_type
        self.search = search
        self.json_path = json_path
        self.show_logs = show_logs
        self.log_dir = log_dir
        self.scorecard: ParsedScorecard = None

    def run(self) -> int:
        """Execute parse + ranking. Returns a process exit code."""
        settings = get_settings()
        logger = get_logger()
        logger.set_console_level(settings.log_level)
        if self.log_dir:
            logger = setup_logging(self.log_dir, os.path.basename(self.workbook_path))

        info = Table.grid(padding=1)
        info.add_column(style="dark_orange", justify="right")
        info.add_column(style="white")
        info.add_row("Workbook:", f"[bold dark_orange]{os.path.basename(self.workbook_path)}[/bold dark_orange]")
        info.add_row("Mode:", "Tal cual Excel" if self.mode == "excel" else "Normalizado")
        info.add_row("Started:", datetime.now().strftime("%Y-%m-%d %H:%M:%S"))
        console.print(Panel(info, title="[bold white]Processing[/bold white]", border_style="dark_orange", box=box.ROUNDED))

        try:
            with open(self.workbook_path, 'rb') as f:
                data = f.read()
        except OSError as e:
            console.print(f"  [red]X[/red] Could not read workbook: {e}")
            logger.error(f"Could not read workbook {self.workbook_path}: {e}")
            return 1

        try:
            self.scorecard = parse_scorecard_workbook(data, settings)
        except WorkbookFormatError as e:
            console.print(f"  [red]X[/red] {e}")
            logger.error(f"Parse failed: {e}")
            return 1

        console.print(f"  [green]>[/green] {len(self.scorecard.units)} units, "
                      f"{len(self.scorecard.kpis)} KPIs, {len(self.scorecard.roi_tir)} ROI/TIR records")

        self._print_ranking()

        if self.json_path:
            try:
                with open(self.json_path, 'w', encoding='utf-8') as f:
                    f.write(self.scorecard.model_dump_json(indent=2))
            except OSError as e:
                console.print(f"  [red]X[/red] Could not write JSON: {e}")
                logger.error(f"Could not write {self.json_path}: {e}")
                return 1
            console.print(f"  [green]>[/green] Scorecard saved to [dim]{self.json_path}[/dim]")

        if self.show_logs:
            self._print_logs()

        return 0

    def _print_ranking(self):
        ranked = rank_units(self.scorecard, self.mode, self.unit_type, self.search)
        area_ids = [a.id for a in self.scorecard.areas]

        table = Table(title="[bold]Ranking[/bold]", box=box.ROUNDED, border_style="rgb(205,102,0)")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Unit", style="bold")
        table.add_column("Type")
        table.add_column("Score", justify="right")
        for area_id in area_ids:
            table.add_column(area_id, justify="right")
        table.add_column("ROI", justify="right")

        for r in ranked:
            row = [
                str(r.rank),
                r.unit.name,
                r.unit.type,
                f"[{LIGHT_STYLES[r.light]}]{_pct(r.score.score_total)}[/{LIGHT_STYLES[r.light]}]",
            ]
            for area_id in area_ids:
                area = r.score.score_by_area[area_id]
                row.append(_pct(area.gained / area.possible, 0) if area.possible > 0 else "[dim]N/A[/dim]")
            row.append(f"{_pct(r.roi_tir.roi, 0)} ({investment_tier(r.roi_tir)})" if r.roi_tir else "[dim]-[/dim]")
            table.add_row(*row)

        console.print()
        console.print(table)

        summary = summarize(ranked)
        if summary.total == 0:
            console.print("[dim]No units match the current filter.[/dim]")
            return

        summary_table = Table(box=box.ROUNDED, show_header=False, border_style="rgb(205,102,0)", padding=(0, 2))
        summary_table.add_column("Label", style="dark_orange")
        summary_table.add_column("Value", style="white")
        summary_table.add_row("Units", str(summary.total))
        summary_table.add_row("Average", _pct(summary.average))
        summary_table.add_row("Best", f"{summary.best.unit.name} ({_pct(summary.best.score.score_total)})")
        summary_table.add_row("Worst", f"{summary.worst.unit.name} ({_pct(summary.worst.score.score_total)})")
        summary_table.add_row("Lights", f"[green]{summary.lights['green']}[/green] / "
                                        f"[yellow]{summary.lights['yellow']}[/yellow] / "
                                        f"[red]{summary.lights['red']}[/red]")
        console.print(summary_table)

    def _print_logs(self):
        text = Text()
        for entry in self.scorecard.debug_logs:
            text.append(entry + "\n", style="yellow" if entry.startswith("WARNING") else "dim")
        console.print(Panel(text, title="[bold]Diagnostic log[/bold]", box=box.ROUNDED))


def main(argv=None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Scorecard - rank business units from a KPI workbook'
    )
    parser.add_argument('workbook', type=str, help='Path to the .xlsx scorecard workbook')
    parser.add_argument(
        '--mode',
        choices=['excel', 'normalized'],
        default='excel',
        help='Use the sheet totals as-is (excel) or recompute them (normalized)'
    )
    parser.add_argument(
        '--type',
        dest='unit_type',
        choices=['all', 'restaurant', 'disco'],
        default='all',
        help='Only show one unit type (default: all)'
    )
    parser.add_argument('--search', type=str, default='', help='Filter units by name')
    parser.add_argument('--json', dest='json_path', type=str, default=None,
                        help='Write the parsed scorecard as JSON to this path')
    parser.add_argument('--logs', action='store_true', help='Print the diagnostic log')
    parser.add_argument('--log-dir', type=str, default=None,
                        help='Folder for a timestamped debug log file')

    args = parser.parse_args(argv)

    if not os.path.exists(args.workbook):
        console.print(f"[red]Error:[/red] Workbook not found: {args.workbook}")
        return 1

    agent = ScorecardAgent(
        args.workbook,
        mode=args.mode,
        unit_type=args.unit_type,
        search=args.search,
        json_path=args.json_path,
        show_logs=args.logs,
        log_dir=args.log_dir,
    )
    return agent.run()


if __name__ == "__main__":
    sys.exit(main())
