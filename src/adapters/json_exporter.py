"""JSON export of the dashboard.

Why JSON:
- Interoperability with other tools (jq, spreadsheets, scripts).
- Keeps a snapshot of the computed view (streak, cards) next to the raw data.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.dashboard import DashboardView


def export_dashboard_json(*, view: DashboardView, output_path: Path) -> Path:
    """Export `DashboardView` as UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = view.model_dump(mode="json")
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
