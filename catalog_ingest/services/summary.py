from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering.

Format:
SUMMARY files={total}/{total} success={success} failed={failed} empty={empty}
products={products} skipped_sheets={skipped} elapsed_sec={elapsed} throughput_pps={throughput}
"""


def _format_number(value: float) -> str:
    # 整数値は小数点なし、極小値は指数表記を避ける
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(value)


def render_summary_line(total_files: int, result: ProcessingResult) -> str:
    """Render the SUMMARY line for a batch run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_files=1, failed_files=0, total_products=84,
        ...     skipped_sheets=0, start_time=start, end_time=end,
        ...     elapsed_seconds=2.0, throughput_products_per_sec=42.0
        ... )
        >>> render_summary_line(1, result)  # doctest: +ELLIPSIS
        'SUMMARY files=1/1 success=1 failed=0 empty=0 products=84 skipped_sheets=0 elapsed_sec=2 ...'
    """
    return (
        f"SUMMARY files={total_files}/{total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"empty={result.empty_files} "
        f"products={result.total_products} "
        f"skipped_sheets={result.skipped_sheets} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)} "
        f"throughput_pps={_format_number(result.throughput_products_per_sec)}"
    )
