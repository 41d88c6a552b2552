import sys
from pathlib import Path

import pytest

# Ensure local package is imported before any installed version
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from twinbench.twinbench import Session  # noqa: E402


@pytest.fixture(autouse=True, scope="session")
def pinned_config():
    """Run the suite on the native backend with a fixed seed."""
    with Session(seed=0, use_jit=False) as cfg:
        yield cfg
