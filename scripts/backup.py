"""Back up every collection into one JSON file.

Note: Works with any storage backend (json files, mysql, memory) because it
reads through the configured StorageBackend.
"""

from __future__ import annotations

import json
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.school_records.school_records.main import bootstrap


def main() -> None:
    container = bootstrap()

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"school_records_{ts}.json"

    snapshot = {name: container.storage.read(name) or [] for name in container.storage.collections()}
    with out_file.open("w", encoding="utf-8") as f:
        json.dump(snapshot, f, ensure_ascii=False, indent=2)
    print(f"OK: Backup created: {out_file} ({len(snapshot)} collections)")


if __name__ == "__main__":
    main()
