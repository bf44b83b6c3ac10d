"""Husholdningsøkonomi - hovedside"""
import streamlit as st

from config.settings import EXCEL_FILE, LAYOUT, PAGE_ICON, PAGE_TITLE
from data_manager.excel_handler import init_excel
from utils.logging_config import configure_logging

configure_logging()

st.set_page_config(
    page_title=PAGE_TITLE,
    page_icon=PAGE_ICON,
    layout=LAYOUT,
    initial_sidebar_state="expanded",
)

init_excel()

st.title(f"{PAGE_ICON} {PAGE_TITLE}")

st.markdown("""
Oversikt over lån, sparing og kontoutskrifter for husholdningen.

### Sider

| Side | Innhold |
|------|---------|
| 🏠 **Lån** | Restgjeld, nedbetalingsplan, ekstra innbetalinger og «hva om» |
| 🧮 **Kalkulator** | Nedbetalingstid, terminbeløp og spareprognose |
| 📥 **CSV-import** | Les inn kontoutskrift fra DNB, Nordea eller Sparebank 1 |
| ⚙️ **Innstillinger** | Standard rente, løpetid og avkastning |

### Kom i gang

1. Registrer lånet ditt under **Lån**
2. Legg inn ekstra innbetalinger etter hvert som du gjør dem
3. Bruk **Kalkulator** for å planlegge nedbetaling og sparing

Alle beløp regnes i øre internt og vises i kroner.
""")

with st.sidebar:
    st.markdown("### Om")
    st.markdown(f"Data lagres i `{EXCEL_FILE.name}`")
