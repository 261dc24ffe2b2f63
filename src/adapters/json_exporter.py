"""JSON export of workflow results (`--output`).

Why JSON:
- Extracted orders and digests can be fed to other tools.
- Keys match the camelCase the AI prompts use.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel


def export_result_json(*, payload: BaseModel | dict[str, Any], output_path: Path) -> Path:
    """Write the payload as UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    data = payload.model_dump(mode="json", by_alias=True) if isinstance(payload, BaseModel) else payload
    output_path.write_text(
        json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
