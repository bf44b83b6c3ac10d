"""Import av kontoutskrifter: CSV -> normaliserte transaksjoner"""
import io
import logging
import re
from datetime import date
from typing import Dict, List, Optional, Tuple

import pandas as pd

from config.constants import COLUMN_KEYWORDS, TRANSACTION_COLUMNS, ColumnField, DecimalSeparator
from config.settings import DEFAULT_SAMPLE_LINES
from core.csv_detect import detect_csv_format
from core.errors import CsvImportError
from data_manager.schema import CsvDetectionResult
from utils.money import parse_leading_number, round_half_up

logger = logging.getLogger(__name__)

_DD_MM_YYYY_RE = re.compile(r"^(\d{2})\.(\d{2})\.(\d{4})$")
_ISO_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_WHITESPACE_RE = re.compile(r"\s")
_HEADER_QUOTE_RE = re.compile(r'^"|"$')


def decode_bank_file(data: bytes, encoding: Optional[str] = None) -> str:
    """Dekod en opplastet fil; faller tilbake til latin-1 når UTF-8 gir erstatningstegn"""
    if encoding:
        return data.decode(encoding, errors="replace")
    text = data.decode("utf-8", errors="replace")
    if "\ufffd" in text:
        logger.info("file is not valid UTF-8, decoding as ISO-8859-1")
        return data.decode("iso-8859-1")
    return text


def _clean_header(name) -> str:
    return _HEADER_QUOTE_RE.sub("", str(name)).strip()


def parse_amount_to_oere(text: str, decimal_separator: str) -> Optional[int]:
    """Beløpstekst -> positive øre, None hvis teksten ikke starter med et tall

    Med komma som desimaltegn er punktum tusenskille ("1.234,56"), og omvendt.
    Utgifter lagres som positive beløp, så fortegnet forkastes.
    """
    if text is None:
        return None
    cleaned = _WHITESPACE_RE.sub("", str(text).strip())
    if decimal_separator == DecimalSeparator.COMMA.value:
        cleaned = cleaned.replace(".", "").replace(",", ".", 1)
    else:
        cleaned = cleaned.replace(",", "")
    value = parse_leading_number(cleaned)
    if value is None:
        return None
    return round_half_up(abs(value) * 100)


def parse_date_to_iso(text: str) -> Optional[str]:
    """dd.mm.yyyy eller yyyy-mm-dd -> yyyy-mm-dd, None for ugyldige datoer (f.eks. 31.02.2024)"""
    if text is None:
        return None
    s = str(text).strip()
    m = _DD_MM_YYYY_RE.match(s)
    if m:
        day, month, year = (int(g) for g in m.groups())
        try:
            return date(year, month, day).isoformat()
        except ValueError:
            return None
    if _ISO_RE.match(s):
        try:
            return date.fromisoformat(s).isoformat()
        except ValueError:
            return None
    return None


def guess_best_column(headers: List[str], field: str) -> str:
    """Første kolonne som inneholder et nøkkelord for feltet, ellers første kolonne"""
    lower = [h.lower().strip() for h in headers]
    for keyword in COLUMN_KEYWORDS[field]:
        for idx, header in enumerate(lower):
            if keyword in header:
                return headers[idx]
    return headers[0] if headers else ""


def guess_column_mapping(headers: List[str]) -> Dict[str, str]:
    return {field.value: guess_best_column(headers, field.value) for field in ColumnField}


def read_bank_csv(
    raw: str,
    detection: Optional[CsvDetectionResult] = None,
    sample_lines: int = DEFAULT_SAMPLE_LINES,
) -> Tuple[CsvDetectionResult, pd.DataFrame]:
    """Les en bankeksport med gjenkjent skilletegn; alle celler beholdes som tekst"""
    if detection is None:
        detection = detect_csv_format(raw, sample_lines)
    try:
        frame = pd.read_csv(
            io.StringIO(raw or ""),
            sep=detection.delimiter,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            on_bad_lines="skip",
        )
    except pd.errors.EmptyDataError as exc:
        raise CsvImportError("Fant ingen kolonner i filen.") from exc
    except pd.errors.ParserError as exc:
        raise CsvImportError(f"CSV-parsing feilet: {exc}") from exc

    frame.columns = [_clean_header(c) for c in frame.columns]
    if len(frame.columns) == 0:
        raise CsvImportError("Fant ingen kolonner i filen.")

    logger.info(
        "read %d rows, %d columns (delimiter=%r, bank=%s, encoding=%s)",
        len(frame), len(frame.columns), detection.delimiter,
        detection.bank_hint, detection.encoding_hint,
    )
    return detection, frame


def to_transactions(
    frame: pd.DataFrame,
    mapping: Dict[str, str],
    decimal_separator: str,
) -> pd.DataFrame:
    """Plukk ut dato, beløp og beskrivelse; rader som ikke kan tolkes hoppes over"""
    for field in ColumnField:
        column = mapping.get(field.value)
        if column not in frame.columns:
            raise CsvImportError(f"Kolonnen for {field.label.lower()} finnes ikke: {column!r}")

    records = []
    skipped = 0
    for _, row in frame.iterrows():
        iso_date = parse_date_to_iso(row[mapping[ColumnField.DATE.value]])
        amount = parse_amount_to_oere(row[mapping[ColumnField.AMOUNT.value]], decimal_separator)
        if iso_date is None or amount is None:
            skipped += 1
            continue
        records.append({
            "date": iso_date,
            "amount_oere": amount,
            "description": str(row[mapping[ColumnField.DESCRIPTION.value]]).strip(),
        })

    if skipped:
        logger.info("skipped %d rows without a valid date or amount", skipped)
    return pd.DataFrame(records, columns=TRANSACTION_COLUMNS)


def _duplicate_key(iso_date: str, amount_oere: int, description: str) -> tuple:
    return iso_date, int(amount_oere), str(description).strip().lower()


def mark_duplicates(transactions: pd.DataFrame, existing: pd.DataFrame) -> pd.DataFrame:
    """Marker rader med samme dato, beløp og beskrivelse (uten store/små bokstaver) som en eksisterende"""
    df = transactions.copy()
    if existing is None or existing.empty:
        df["is_duplicate"] = False
        return df

    known = {
        _duplicate_key(r["date"], r["amount_oere"], r["description"])
        for _, r in existing.iterrows()
    }
    df["is_duplicate"] = [
        _duplicate_key(r["date"], r["amount_oere"], r["description"]) in known
        for _, r in df.iterrows()
    ]
    return df
