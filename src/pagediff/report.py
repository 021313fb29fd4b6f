"""JSON report helpers."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Optional, Sequence

from .compare import DocumentVerdict
from .config import ToleranceConfig


def _report_data(
    verdict: DocumentVerdict,
    config: Optional[ToleranceConfig],
    files: Optional[Sequence[str | Path]],
) -> Dict[str, object]:
    data = verdict.to_dict()
    if config is not None:
        data["params"] = config.to_dict()
    if files is not None:
        data["files"] = [str(path) for path in files]
    return data


def write_json_report(
    verdict: DocumentVerdict,
    path: str | Path,
    *,
    config: Optional[ToleranceConfig] = None,
    files: Optional[Sequence[str | Path]] = None,
) -> None:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    data = _report_data(verdict, config, files)
    with out_path.open("w", encoding="utf-8") as handle:
        json.dump(data, handle, ensure_ascii=False, indent=2)


def verdict_to_json(
    verdict: DocumentVerdict,
    *,
    config: Optional[ToleranceConfig] = None,
    files: Optional[Sequence[str | Path]] = None,
) -> str:
    return json.dumps(_report_data(verdict, config, files), ensure_ascii=False, indent=2)
