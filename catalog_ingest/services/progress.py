from __future__ import annotations

import sys
from collections import Counter
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from tqdm import tqdm

from ..models.workbook_file import FileStatus

"""Workbook progress bar (tqdm, TTY only).

Piped / CI output gets no bar at all, so the labeled log lines stay free of
carriage returns and ANSI sequences.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """One bar tick per workbook; the postfix shows running outcome tallies."""

    def __init__(self, files: Sequence[Path], *, description: str = "Ingesting workbooks") -> None:
        self.files = list(files)
        self.description = description
        self.outcomes: Counter[str] = Counter()
        self.products = 0
        self.pbar: Any = None
        if self.files and is_tty_enabled():
            self.pbar = tqdm(
                total=len(self.files),
                desc=description,
                unit="workbook",
                leave=True,
                ncols=80,
                ascii=True,
            )

    @property
    def enabled(self) -> bool:
        return self.pbar is not None

    def begin(self, file_path: Path) -> None:
        if self.pbar is not None:
            self.pbar.set_description_str(f"{self.description} [{file_path.name}]")

    def record(self, status: FileStatus, products: int = 0) -> None:
        self.outcomes[status.value] += 1
        self.products += products
        if self.pbar is None:
            return
        self.pbar.set_description_str(self.description)
        self.pbar.set_postfix(
            ok=self.outcomes[FileStatus.SUCCESS.value],
            failed=self.outcomes[FileStatus.FAILED.value],
            products=self.products,
            refresh=False,
        )
        self.pbar.update(1)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
