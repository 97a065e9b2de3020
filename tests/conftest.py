from __future__ import annotations

import sys
from collections import Counter
from pathlib import Path
from typing import List

import pytest

ROOT = Path(__file__).resolve().parent.parent

# tests import both `tests.support` and the `yeetyoink` package from src/
for path in (ROOT, ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.append(str(path))


def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: List[pytest.Item],
) -> None:
    """Scenario tables share one test function, so a repeated id would silently shadow a case."""
    del session, config

    counts = Counter(item.nodeid for item in items)
    repeated = sorted(nodeid for nodeid, n in counts.items() if n > 1)
    if repeated:
        listing = "\n".join(f"- {nodeid}" for nodeid in repeated)
        raise pytest.UsageError(f"Duplicate pytest nodeids detected during collection:\n{listing}")
