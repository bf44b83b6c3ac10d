import math
import re
from typing import Optional, Union

from config.settings import MAX_OERE

Number = Union[int, float]

_LEADING_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def round_half_up(value: Number) -> int:
    """Nærmeste heltall, halve runder opp mot +uendelig (1.5 -> 2, -2.5 -> -2)"""
    floor = math.floor(value)
    return floor + 1 if value - floor >= 0.5 else floor


def parse_leading_number(text: str) -> Optional[float]:
    """Leser tallet i starten av en streng: "12.5 kr" -> 12.5, "abc" -> None"""
    m = _LEADING_NUMBER_RE.match(text.strip())
    if not m:
        return None
    return float(m.group(0))


def nok_to_oere(value: str) -> int:
    """Konverter NOK-tekst ("12.50" / "12,50") til øre"""
    if value is None:
        raise ValueError("Ugyldig beløp")
    parsed = parse_leading_number(value.replace(",", ".", 1))
    if parsed is None or parsed < 0:
        raise ValueError("Ugyldig beløp")
    oere = round_half_up(parsed * 100)
    if oere > MAX_OERE:
        raise ValueError("Beløp er for stort")
    return oere


def oere_to_nok(oere: int) -> float:
    return oere / 100
