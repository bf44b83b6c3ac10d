def _group_thousands(value: str) -> str:
    # norsk tusenskille er mellomrom
    return value.replace(",", " ")


def format_nok(oere: int) -> str:
    """Formater øre som kroner: 123456 -> 1 234,56 kr"""
    sign = "−" if oere < 0 else ""
    kroner = abs(oere) / 100
    text = _group_thousands(f"{kroner:,.2f}")
    whole, _, fraction = text.rpartition(".")
    return f"{sign}{whole},{fraction} kr"


def fmt_rate(value: float) -> str:
    """Formater rente: 5.25 -> 5,25 %"""
    return f"{value:.2f}".replace(".", ",") + " %"


def fmt_percent(value: int) -> str:
    """Formater heltallsprosent: 42 -> 42 %"""
    return f"{value} %"


def fmt_months(months: int) -> str:
    """Formater måneder som år og måneder: 27 -> 2 år 3 mnd"""
    years = months // 12
    remain = months % 12
    if years == 0:
        return f"{remain} mnd"
    if remain == 0:
        return f"{years} år"
    return f"{years} år {remain} mnd"
