from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.school_records.school_records.demo_data import seed_all
from src.school_records.school_records.main import bootstrap


def main() -> None:
    container = bootstrap()
    seed_all(container)

    counts = {name: container.store.count(name) for name in container.storage.collections()}
    print("OK: Seeded demo data ->", ", ".join(f"{k}={v}" for k, v in counts.items()))


if __name__ == "__main__":
    main()
