import os
from pathlib import Path

# Prosjektrot
PROJECT_ROOT = Path(__file__).parent.parent

# Datafiler
DATA_DIR = Path(os.getenv("HUSHOLDNING_DATA_DIR", PROJECT_ROOT / "data"))
EXCEL_FILE = DATA_DIR / "husholdning.xlsx"
BACKUP_KEEP = 5

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
# Biblioteker som logger mye på INFO
NOISY_LOGGERS = ("streamlit", "urllib3", "watchdog", "openpyxl")
NOISY_LOG_LEVEL = os.getenv("NOISY_LOG_LEVEL", "WARNING")

# Standardverdier for lån
DEFAULT_LOAN_RATE = 5.0
DEFAULT_TERM_MONTHS = 300

# Standard avkastning for sparing (%)
DEFAULT_SAVINGS_RETURN = 7.0
SAVINGS_HORIZONS_YEARS = [5, 10, 20, 30]

# CSV-gjenkjenning: antall linjer som undersøkes
DEFAULT_SAMPLE_LINES = 20

# Beløpsgrenser (øre)
MAX_OERE = 2_000_000_000
MAX_SAFE_OERE = 2 ** 53 - 1

# Sidekonfigurasjon
PAGE_TITLE = "Husholdningsøkonomi"
PAGE_ICON = "🏡"
LAYOUT = "wide"

# Diagramfarger
COLORS = {
    "primary": "#4f46e5",
    "secondary": "#f59e0b",
    "success": "#16a34a",
    "danger": "#dc2626",
    "info": "#0ea5e9",
    "balance": "#4f46e5",
    "interest": "#f59e0b",
    "extra": "#16a34a",
    "contributed": "#94a3b8",
}
