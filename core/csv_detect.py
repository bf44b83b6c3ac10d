"""CSV-formatgjenkjenning for norske bankeksporter (DNB, Nordea, Sparebank 1)

Skilletegn, desimaltegn, datoformat, tegnsett og bank gjettes ut fra
frekvenser i de første linjene. Funksjonene kaster aldri unntak for tekst
input; i verste fall returneres standardverdier med ``confident=False``.
"""
import logging
import re
from typing import List, Optional, Tuple

from config.constants import BankHint, DateFormat, DecimalSeparator, Delimiter, EncodingHint
from config.settings import DEFAULT_SAMPLE_LINES
from data_manager.schema import CsvDetectionResult

logger = logging.getLogger(__name__)

# Representative rader fra vanlige norske banker, brukt i tester og hjelpetekst
BANK_SAMPLES = {
    BankHint.DNB.value: "\n".join([
        '"Dato";"Forklaringstekst";"Rentedato";"Beløp";"Saldo"',
        '"01.01.2024";"Netthandel NETFLIX";"03.01.2024";"-179,00";"24821,00"',
        '"15.01.2024";"Lønn ARBEIDSGIVER AS";"17.01.2024";"45000,00";"69821,00"',
    ]),
    BankHint.NORDEA.value: "\n".join([
        "Bokføringsdato;Beløp;Avsender;Mottaker;Navn;Tittel;Valuta;Betalt beløp",
        "01.01.2024;-350,00;12345678901;98765432101;REMA 1000;Dagligvarer;NOK;350,00",
        "15.01.2024;45000,00;34567890123;12345678901;ARBEIDSGIVER AS;Lønnsutbetaling;NOK;45000,00",
    ]),
    BankHint.SPAREBANK1.value: "\n".join([
        '"Dato";"Beskrivelse";"Beløp";"Ut fra konto";"Inn på konto"',
        '"01.01.2024";"REMA 1000 OSLO";"-350,00";"350,00";""',
        '"15.01.2024";"Lønnsutbetaling";"45000,00";"";"45000,00"',
    ]),
}

_DELIMITER_CANDIDATES = [Delimiter.SEMICOLON, Delimiter.COMMA, Delimiter.TAB]

# Minus, sifre, valgfri tusengruppering, 1-2 desimaler
_DOT_NUMBER_RE = re.compile(r"-?\d{1,3}(?:\.\d{3})*(?:\.\d{1,2})?|-?\d+\.\d{1,2}")
_COMMA_NUMBER_RE = re.compile(r"-?\d{1,3}(?:,\d{3})*(?:,\d{1,2})?|-?\d+,\d{1,2}")

_DD_MM_YYYY_RE = re.compile(r"\d{2}\.\d{2}\.\d{4}")
_YYYY_MM_DD_RE = re.compile(r"\d{4}-\d{2}-\d{2}")

# æ/ø/å lagret som UTF-8 men lest som latin-1
_MOJIBAKE_RE = re.compile("\u00c3[\u00a6\u00b8\u2026]")

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_QUOTE_RE = re.compile(r'^"|"$')


def split_cells(line: str, delimiter: str) -> List[str]:
    """Del en linje på skilletegnet og fjern omsluttende anførselstegn"""
    return [_QUOTE_RE.sub("", cell).strip() for cell in line.split(delimiter)]


def detect_delimiter(lines: List[str]) -> Tuple[str, bool]:
    """Kandidaten med høyest gjennomsnittlig antall per linje vinner

    Sikker når skilletegnet forekommer minst én gang per linje i snitt.
    """
    best = Delimiter.SEMICOLON.value
    best_mean = -1.0
    for candidate in _DELIMITER_CANDIDATES:
        counts = [line.count(candidate.value) for line in lines]
        mean = sum(counts) / len(counts) if counts else 0.0
        if mean > best_mean:
            best_mean = mean
            best = candidate.value
    return best, best_mean >= 1


def detect_decimal_separator(lines: List[str], delimiter: str) -> Tuple[str, bool]:
    comma_score = 0
    dot_score = 0
    for line in lines:
        for cell in split_cells(line, delimiter):
            if cell == "" or cell == "-":
                continue
            if _COMMA_NUMBER_RE.fullmatch(cell):
                comma_score += 1
            elif _DOT_NUMBER_RE.fullmatch(cell):
                dot_score += 1

    logger.debug("decimal scores: comma=%d dot=%d", comma_score, dot_score)
    if comma_score == 0 and dot_score == 0:
        return DecimalSeparator.COMMA.value, False

    # uavgjort gir komma (norsk standard)
    separator = DecimalSeparator.COMMA.value if comma_score >= dot_score else DecimalSeparator.DOT.value
    return separator, comma_score != dot_score


def detect_date_format(lines: List[str], delimiter: str) -> Tuple[str, bool]:
    dd_score = 0
    iso_score = 0
    for line in lines:
        for cell in split_cells(line, delimiter):
            if _DD_MM_YYYY_RE.fullmatch(cell):
                dd_score += 1
            elif _YYYY_MM_DD_RE.fullmatch(cell):
                iso_score += 1

    logger.debug("date scores: dd.mm.yyyy=%d yyyy-mm-dd=%d", dd_score, iso_score)
    if dd_score == 0 and iso_score == 0:
        return DateFormat.UNKNOWN.value, False
    if dd_score >= iso_score:
        return DateFormat.DD_MM_YYYY.value, True
    return DateFormat.YYYY_MM_DD.value, True


def detect_encoding(raw: str) -> str:
    """Heuristikk på allerede dekodet tekst, ikke ekte tegnsett-sniffing"""
    if "\ufffd" in raw or _MOJIBAKE_RE.search(raw):
        return EncodingHint.ISO_8859_1.value
    return EncodingHint.UTF_8.value


def detect_bank(header_line: str, delimiter: str) -> str:
    """Gjenkjenn bank ut fra kolonnenavn i overskriftslinjen"""
    joined = "|".join(cell.lower() for cell in split_cells(header_line, delimiter))

    if "forklaringstekst" in joined and "rentedato" in joined:
        return BankHint.DNB.value
    if "bokføringsdato" in joined or "avsender" in joined:
        return BankHint.NORDEA.value
    if "ut fra konto" in joined or "inn på konto" in joined:
        return BankHint.SPAREBANK1.value
    return BankHint.UNKNOWN.value


def detect_csv_format(
    raw: Optional[str],
    sample_lines: int = DEFAULT_SAMPLE_LINES,
) -> CsvDetectionResult:
    """Gjenkjenn formatet til en rå CSV-streng

    ``sample_lines`` begrenser hvor mange ikke-tomme linjer som undersøkes, så
    store filer kan sjekkes billig.
    """
    text = raw or ""
    all_lines = [line for line in _LINE_SPLIT_RE.split(text) if line.strip() != ""]
    lines = all_lines[:max(0, sample_lines)]

    delimiter, delimiter_confident = detect_delimiter(lines)

    # overskriften hoppes over ved verdibasert gjenkjenning
    data_lines = lines[1:] if len(lines) > 1 else lines

    decimal_separator, decimal_confident = detect_decimal_separator(data_lines, delimiter)
    date_format, date_confident = detect_date_format(data_lines, delimiter)
    encoding_hint = detect_encoding(text)
    bank_hint = detect_bank(lines[0], delimiter) if lines else BankHint.UNKNOWN.value

    result = CsvDetectionResult(
        delimiter=delimiter,
        decimal_separator=decimal_separator,
        date_format=date_format,
        encoding_hint=encoding_hint,
        confident=delimiter_confident and decimal_confident and date_confident,
        bank_hint=bank_hint,
    )
    logger.debug("csv detection over %d lines: %s", len(lines), result)
    return result
