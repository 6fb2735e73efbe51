from __future__ import annotations

from ops_console.app.ui.accessors import EMPTY_VALUE

MAX_CELL_WIDTH = 40


def _cell(value: str | None) -> str:
    text = value if value else EMPTY_VALUE
    if len(text) > MAX_CELL_WIDTH:
        return f"{text[: MAX_CELL_WIDTH - 3]}..."
    return text


def print_table(title: str, rows: list[dict[str, str]], columns: list[tuple[str, str]]) -> None:
    print(f"\n{title}")
    if not columns:
        print("(no visible columns)")
        return
    if not rows:
        print("(no results)")
        return

    widths = []
    for key, header in columns:
        max_cell = max(len(_cell(row.get(key))) for row in rows)
        widths.append(max(len(header), max_cell))

    header_line = " | ".join(header.ljust(widths[idx]) for idx, (_, header) in enumerate(columns))
    separator = "-+-".join("-" * width for width in widths)
    print(header_line)
    print(separator)

    for row in rows:
        line = " | ".join(_cell(row.get(key)).ljust(widths[idx]) for idx, (key, _) in enumerate(columns))
        print(line)
