import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import pandas as pd
from openpyxl import load_workbook

from config.constants import (
    SHEET_LOANS, SHEET_EXTRA_PAYMENTS, SHEET_CONFIG,
    LOANS_COLUMNS, EXTRA_PAYMENTS_COLUMNS, CONFIG_COLUMNS, SCHEDULE_COLUMNS,
)
from config.settings import (
    EXCEL_FILE, BACKUP_KEEP, DEFAULT_LOAN_RATE, DEFAULT_TERM_MONTHS,
    DEFAULT_SAVINGS_RETURN, DEFAULT_SAMPLE_LINES,
)

logger = logging.getLogger(__name__)

# Norske kolonnenavn i eksportert nedbetalingsplan
SCHEDULE_HEADERS = {
    "period": "Termin",
    "month": "Måned",
    "opening_balance_oere": "Inngående saldo (kr)",
    "interest_oere": "Renter (kr)",
    "scheduled_payment_oere": "Terminbeløp (kr)",
    "extra_payment_oere": "Ekstra (kr)",
    "closing_balance_oere": "Utgående saldo (kr)",
    "cumulative_interest_oere": "Sum renter (kr)",
}


def _default_config_rows() -> List[dict]:
    now = datetime.now().isoformat()
    return [
        {"key": "default_rate", "value": str(DEFAULT_LOAN_RATE), "description": "Standard rente (%)", "updated_at": now},
        {"key": "default_term_months", "value": str(DEFAULT_TERM_MONTHS), "description": "Standard løpetid (mnd)", "updated_at": now},
        {"key": "savings_return", "value": str(DEFAULT_SAVINGS_RETURN), "description": "Forventet avkastning sparing (%)", "updated_at": now},
        {"key": "csv_sample_lines", "value": str(DEFAULT_SAMPLE_LINES), "description": "Linjer som undersøkes ved CSV-import", "updated_at": now},
    ]


def init_excel(filepath: Path = EXCEL_FILE):
    """Opprett arbeidsboken med alle ark og overskrifter hvis den mangler"""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    if filepath.exists():
        return

    logger.info("creating workbook %s", filepath)
    with pd.ExcelWriter(filepath, engine="openpyxl") as writer:
        pd.DataFrame(columns=LOANS_COLUMNS).to_excel(
            writer, sheet_name=SHEET_LOANS, index=False)
        pd.DataFrame(columns=EXTRA_PAYMENTS_COLUMNS).to_excel(
            writer, sheet_name=SHEET_EXTRA_PAYMENTS, index=False)
        config_df = pd.DataFrame(_default_config_rows(), columns=CONFIG_COLUMNS)
        config_df.to_excel(writer, sheet_name=SHEET_CONFIG, index=False)


def backup_excel(filepath: Path = EXCEL_FILE):
    """Sikkerhetskopi før skriving; bare de siste BACKUP_KEEP beholdes"""
    filepath = Path(filepath)
    if not filepath.exists():
        return
    ts = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    backup_path = filepath.with_suffix(f".xlsx.bak_{ts}")
    shutil.copy2(filepath, backup_path)
    backups = sorted(filepath.parent.glob(f"{filepath.stem}.xlsx.bak_*"))
    for old in backups[:-BACKUP_KEEP]:
        old.unlink()
        logger.debug("removed old backup %s", old.name)


def read_sheet(sheet_name: str, filepath: Path = EXCEL_FILE) -> pd.DataFrame:
    init_excel(filepath)
    try:
        df = pd.read_excel(filepath, sheet_name=sheet_name, engine="openpyxl")
    except ValueError:
        logger.warning("sheet %r missing in %s", sheet_name, filepath)
        df = pd.DataFrame()
    return df


def write_sheet(df: pd.DataFrame, sheet_name: str, filepath: Path = EXCEL_FILE):
    """Skriv over ett ark og behold de andre"""
    init_excel(filepath)
    backup_excel(filepath)

    wb = load_workbook(filepath)
    if sheet_name in wb.sheetnames:
        del wb[sheet_name]
    wb.save(filepath)

    with pd.ExcelWriter(filepath, engine="openpyxl", mode="a", if_sheet_exists="replace") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
    logger.info("wrote %d rows to sheet %r", len(df), sheet_name)


def _with_columns(df: pd.DataFrame, columns: List[str]) -> pd.DataFrame:
    if df.empty and len(df.columns) == 0:
        return pd.DataFrame(columns=columns)
    return df


# ---- Lån ----

def get_all_loans(filepath: Path = EXCEL_FILE) -> pd.DataFrame:
    return _with_columns(read_sheet(SHEET_LOANS, filepath), LOANS_COLUMNS)


def get_loan_by_id(loan_id: str, filepath: Path = EXCEL_FILE) -> Optional[pd.Series]:
    df = get_all_loans(filepath)
    match = df[df["loan_id"].astype(str) == str(loan_id)]
    if match.empty:
        return None
    return match.iloc[0]


def save_loan(loan_dict: dict, filepath: Path = EXCEL_FILE):
    """Legg til et nytt lån eller oppdater et eksisterende med samme loan_id"""
    df = get_all_loans(filepath)
    mask = df["loan_id"].astype(str) == str(loan_dict["loan_id"])
    if mask.any():
        for col in loan_dict:
            if col in df.columns:
                df.loc[mask, col] = loan_dict[col]
    else:
        new_row = pd.DataFrame([loan_dict], columns=LOANS_COLUMNS)
        df = new_row if df.empty else pd.concat([df, new_row], ignore_index=True)
    write_sheet(df, SHEET_LOANS, filepath)


def delete_loan(loan_id: str, filepath: Path = EXCEL_FILE):
    df = get_all_loans(filepath)
    df = df[df["loan_id"].astype(str) != str(loan_id)]
    write_sheet(df, SHEET_LOANS, filepath)
    # ekstra innbetalinger hører til lånet
    payments = get_extra_payments(filepath=filepath)
    if not payments.empty:
        payments = payments[payments["loan_id"].astype(str) != str(loan_id)]
        write_sheet(payments, SHEET_EXTRA_PAYMENTS, filepath)


# ---- Ekstra innbetalinger ----

def get_extra_payments(loan_id: Optional[str] = None, filepath: Path = EXCEL_FILE) -> pd.DataFrame:
    """Alle ekstra innbetalinger, eventuelt bare for ett lån"""
    df = _with_columns(read_sheet(SHEET_EXTRA_PAYMENTS, filepath), EXTRA_PAYMENTS_COLUMNS)
    if loan_id is None:
        return df
    return df[df["loan_id"].astype(str) == str(loan_id)].reset_index(drop=True)


def save_extra_payment(record: dict, filepath: Path = EXCEL_FILE):
    df = get_extra_payments(filepath=filepath)
    new_row = pd.DataFrame([record], columns=EXTRA_PAYMENTS_COLUMNS)
    df = new_row if df.empty else pd.concat([df, new_row], ignore_index=True)
    write_sheet(df, SHEET_EXTRA_PAYMENTS, filepath)


def delete_extra_payment(payment_id: str, filepath: Path = EXCEL_FILE):
    df = get_extra_payments(filepath=filepath)
    df = df[df["payment_id"].astype(str) != str(payment_id)]
    write_sheet(df, SHEET_EXTRA_PAYMENTS, filepath)


# ---- Innstillinger ----

def get_config(key: str, filepath: Path = EXCEL_FILE) -> Optional[str]:
    df = read_sheet(SHEET_CONFIG, filepath)
    if df.empty:
        return None
    match = df[df["key"] == key]
    if match.empty:
        return None
    return str(match.iloc[0]["value"])


def get_config_float(key: str, default: float, filepath: Path = EXCEL_FILE) -> float:
    """Tallverdi fra Innstillinger, med standardverdien som reserve"""
    raw = get_config(key, filepath)
    try:
        return float(raw) if raw is not None else default
    except ValueError:
        logger.warning("config %r has non-numeric value %r, using %s", key, raw, default)
        return default


def get_all_config(filepath: Path = EXCEL_FILE) -> pd.DataFrame:
    return read_sheet(SHEET_CONFIG, filepath)


def set_config(key: str, value: str, description: str = "", filepath: Path = EXCEL_FILE):
    df = _with_columns(read_sheet(SHEET_CONFIG, filepath), CONFIG_COLUMNS)
    now = datetime.now().isoformat()
    if key in df["key"].values:
        df["value"] = df["value"].astype(object)
        df.loc[df["key"] == key, "value"] = value
        df.loc[df["key"] == key, "updated_at"] = now
        if description:
            df.loc[df["key"] == key, "description"] = description
    else:
        new_row = pd.DataFrame([{
            "key": key, "value": value,
            "description": description, "updated_at": now,
        }])
        df = pd.concat([df, new_row], ignore_index=True)
    write_sheet(df, SHEET_CONFIG, filepath)


# ---- Eksport ----

def export_schedule_excel(schedule: pd.DataFrame, path: Path) -> Path:
    """Skriv en nedbetalingsplan til egen fil, beløp i kroner"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = schedule[SCHEDULE_COLUMNS].copy()
    for col in SCHEDULE_COLUMNS:
        if col.endswith("_oere"):
            df[col] = df[col] / 100
    df = df.rename(columns=SCHEDULE_HEADERS)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name="Nedbetalingsplan", index=False)
    logger.info("exported %d schedule rows to %s", len(df), path)
    return path
