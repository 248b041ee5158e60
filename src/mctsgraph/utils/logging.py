"""
Logging utilities with rich formatting.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Optional, Any, TYPE_CHECKING

from rich.console import Console
from rich.table import Table
from rich.tree import Tree
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TimeElapsedColumn,
    MofNCompleteColumn,
)
from rich.panel import Panel

if TYPE_CHECKING:
    from ..mcts.search import SearchReport


console = Console()


class Logger:
    """
    Search logger with rich output and optional JSON-lines log.

    Args:
        log_dir: Directory for the log file (None = console only)
        verbose: Whether to print to console
    """

    def __init__(self, log_dir: Optional[str] = None, verbose: bool = True):
        self.verbose = verbose
        self.log_file: Optional[Path] = None

        if log_dir is not None:
            path = Path(log_dir)
            path.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.log_file = path / f"search_{timestamp}.jsonl"

        self.history: list[SearchReport] = []

    def log_search(self, report: SearchReport, move: Optional[int] = None) -> None:
        """Log the summary of one search."""
        self.history.append(report)

        if self.log_file is not None:
            record = asdict(report)
            record["best_action"] = None if report.best_action is None else str(report.best_action)
            record["move"] = move
            record["timestamp"] = datetime.now().isoformat()
            with open(self.log_file, "a") as f:
                f.write(json.dumps(record) + "\n")

        if self.verbose:
            self._print_search(report, move)

    def _print_search(self, r: SearchReport, move: Optional[int]) -> None:
        """Print search summary to console."""
        title = "Search" if move is None else f"Search (move {move})"
        table = Table(title=title, show_header=False, box=None)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="white")

        table.add_row("Iterations", str(r.iterations))
        table.add_row("Nodes", str(r.nodes))
        table.add_row("Time", f"{r.elapsed:.2f}s")
        if r.elapsed > 0:
            table.add_row("Iter/s", f"{r.iterations / r.elapsed:.0f}")
        if r.best_action is not None:
            table.add_row("Best", str(r.best_action))
            table.add_row("Avg Value", f"{r.best_avg_val:.3f}")
            table.add_row("Visits", str(r.best_n_visits))

        console.print(table)

    def log_message(self, message: str, style: str = "white") -> None:
        """Log a message."""
        if self.verbose:
            console.print(f"[{style}]{message}[/]")

    def log_info(self, message: str) -> None:
        """Log info message."""
        self.log_message(message, "blue")

    def log_error(self, message: str) -> None:
        """Log error message."""
        self.log_message(message, "red")


def create_progress() -> Progress:
    """Create a rich progress bar with elapsed time."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_config(config: Any) -> None:
    """Print configuration in a nice format."""
    table = Table(title="Configuration", show_header=True)
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="white")

    def add_dict(d: dict, prefix: str = "") -> None:
        for k, v in d.items():
            key = f"{prefix}{k}" if prefix else k
            if isinstance(v, dict):
                add_dict(v, f"{key}.")
            else:
                table.add_row(key, str(v))

    add_dict(asdict(config))
    console.print(table)


def print_board(board_str: str, title: str = "Board") -> None:
    """Print a game board in a panel."""
    console.print(Panel(board_str, title=title, border_style="blue"))


def print_root_moves(moves: list[tuple[Any, float, int]], title: str = "Root moves") -> None:
    """Print (action, value, visits) rows, most visited first."""
    table = Table(title=title)
    table.add_column("Action", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_column("Visits", style="yellow", justify="right")

    for action, value, visits in sorted(moves, key=lambda m: -m[2]):
        table.add_row(str(action), f"{value:.3f}", str(visits))

    console.print(table)


def build_tree(tree_dict: dict, label: str = "root") -> Tree:
    """Convert a SearchGraph.to_dict() view into a rich Tree."""
    tree = Tree(f"[bold]{label}[/] visits={tree_dict['n_visits']}")

    def add_children(branch: Tree, node: dict) -> None:
        for child in sorted(node["children"], key=lambda c: -c["n_visits"]):
            sub = branch.add(
                f"[cyan]{child['action']}[/] p{child['player']} "
                f"avg={child['avg_val']:.3f} best={child['best_val']:.3f} "
                f"n={child['n_visits']}"
            )
            if "node" in child:
                add_children(sub, child["node"])

    add_children(tree, tree_dict)
    return tree
