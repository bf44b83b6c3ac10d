import sys
from datetime import date
from pathlib import Path

import pytest

# prosjektroten må ligge på sys.path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from data_manager.excel_handler import init_excel  # noqa: E402


@pytest.fixture
def today():
    return date(2026, 10, 18)


@pytest.fixture
def temp_excel(tmp_path):
    """Midlertidig arbeidsbok"""
    filepath = tmp_path / "test_data.xlsx"
    init_excel(filepath)
    return filepath
