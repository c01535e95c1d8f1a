import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path to allow `import agents`, `import models`, etc.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tests.mocks import StubTextOracle  # noqa: E402


@pytest.fixture
def stub_oracle():
    """Oracle answering every forecast prompt with DEFAULT_FORECAST_PAYLOAD."""
    return StubTextOracle()
