"""Markdown report output."""

from typing import Sequence, TextIO


def md_header(out: TextIO, level: int, title: str):
    out.write(f"{'#' * level} {title}\n\n")


def md_bullet(out: TextIO, label: str, value: str):
    out.write(f"- **{label}:** {value}\n")


def md_table(out: TextIO, headers: Sequence[str], rows: Sequence[Sequence[str]]):
    """Write a pipe table; short rows are padded to the header width."""
    if not headers:
        return
    out.write(f"| {' | '.join(headers)} |\n")
    out.write(f"| {' | '.join('---' for _ in headers)} |\n")
    for row in rows:
        cells = [_escape(c) for c in row] + [""] * (len(headers) - len(row))
        out.write(f"| {' | '.join(cells)} |\n")
    out.write("\n")


def _escape(cell: str) -> str:
    return cell.replace("|", "\\|")
