from __future__ import annotations

import time

from catalog_ingest import process_workbook

"""Throughput smoke test: one 2,000-row workbook through the full pipeline."""

ROWS = 2_000


def test_ingest_throughput(make_workbook):
    rows = [["Title"], ["Item Description", "Barcode", "Unit Cost", "Units", "Retail Price"]]
    rows += [[f"Item {i}", f"{7890000000000 + i}", 1.25, 12, 2.5] for i in range(ROWS)]
    data = make_workbook({"Bulk": rows})

    start = time.perf_counter()
    result = process_workbook(data)
    elapsed = time.perf_counter() - start

    assert result.total_products == ROWS
    assert result.products[-1].number == str(ROWS + 2)
    # lenient so CI stays green on slow runners
    assert elapsed < 30, f"ingestion too slow: {elapsed:.2f}s"
