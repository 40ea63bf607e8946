from __future__ import annotations

import sys
from collections.abc import Iterable, Iterator
from typing import Any, TypeVar

from tqdm import tqdm

"""Progress display with tqdm (TTY only).

Workbook rows are normalized inside a progress bar when stdout is a terminal;
in non-TTY environments (CI, pipes) the bar is disabled so no ANSI control
sequences end up in logs.
"""

__all__ = [
    "RowProgress",
    "is_tty_enabled",
]

T = TypeVar("T")


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class RowProgress:
    """Progress bar over the rows of one import."""

    def __init__(self, total_rows: int, *, description: str = "Normalizing rows") -> None:
        self.total_rows = total_rows
        self.description = description
        self.processed = 0
        self.enabled = is_tty_enabled()
        self.pbar: tqdm[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_rows,
                desc=description,
                unit="row",
                leave=False,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def track(self, rows: Iterable[T]) -> Iterator[T]:
        for row in rows:
            yield row
            self.advance()

    def advance(self, n: int = 1) -> None:
        self.processed += n
        if self.pbar is not None:
            self.pbar.update(n)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> RowProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
