"""Display-ready summary rows and CSV export."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterator

from .models import SummaryReport, TypeCount, TypeLength

CSV_FIELDNAMES = ["section", "type", "value"]


def build_report(
    summary: dict[str, int],
    details: dict[str, float],
    precision: int = 2,
) -> SummaryReport:
    """Turn summarize output into ordered rows, rounding lengths for display."""
    return SummaryReport(
        total_features=sum(summary.values()),
        summary=[TypeCount(type=t, count=c) for t, c in summary.items()],
        details=[TypeLength(type=t, length_km=round(km, precision)) for t, km in details.items()],
    )


def report_to_csv(report: SummaryReport) -> Iterator[str]:
    """Yield the report as CSV text, one chunk per row."""
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=CSV_FIELDNAMES)

    def flush() -> str:
        text = buf.getvalue()
        buf.seek(0)
        buf.truncate(0)
        return text

    writer.writeheader()
    yield flush()

    for row in report.summary:
        writer.writerow({"section": "summary", "type": row.type, "value": row.count})
        yield flush()

    for row in report.details:
        writer.writerow({"section": "details", "type": row.type, "value": f"{row.length_km:.2f}"})
        yield flush()
