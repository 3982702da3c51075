import sys
from pathlib import Path

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from finance_tracker.db import RecordStore  # noqa: E402

OWNER = 'user-1'
OTHER = 'user-2'


@pytest.fixture
def store(tmp_path):
    return RecordStore(tmp_path / 'finance.db')
