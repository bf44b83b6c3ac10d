"""Tester for gjenkjenning av CSV-format"""
import pytest

from core.csv_detect import (
    BANK_SAMPLES,
    detect_bank,
    detect_csv_format,
    detect_delimiter,
    split_cells,
)


class TestBankSamples:
    """Eksempelfilene gjenkjennes som sin egen bank"""

    @pytest.mark.parametrize("bank", ["dnb", "nordea", "sparebank1"])
    def test_sample_exists(self, bank):
        assert isinstance(BANK_SAMPLES[bank], str)
        assert BANK_SAMPLES[bank]

    def test_dnb_sample_shape(self):
        assert ";" in BANK_SAMPLES["dnb"]
        assert "01.01.2024" in BANK_SAMPLES["dnb"]


class TestDnb:
    """DNB-eksport"""

    def test_detection(self):
        result = detect_csv_format(BANK_SAMPLES["dnb"])
        assert result.delimiter == ";"
        assert result.date_format == "dd.mm.yyyy"
        assert result.decimal_separator == ","
        assert result.bank_hint == "dnb"
        assert result.encoding_hint == "UTF-8"
        assert result.confident is True


class TestNordea:
    """Nordea-eksport"""

    def test_detection(self):
        result = detect_csv_format(BANK_SAMPLES["nordea"])
        assert result.delimiter == ";"
        assert result.date_format == "dd.mm.yyyy"
        assert result.decimal_separator == ","
        assert result.bank_hint == "nordea"


class TestSparebank1:
    """Sparebank 1-eksport"""

    def test_detection(self):
        result = detect_csv_format(BANK_SAMPLES["sparebank1"])
        assert result.delimiter == ";"
        assert result.date_format == "dd.mm.yyyy"
        assert result.bank_hint == "sparebank1"


class TestIsoFormat:
    """Punktum som desimaltegn og ISO-datoer"""

    CSV = "\n".join([
        "date,amount,description",
        "2024-01-15,1500.00,Salary",
        "2024-01-20,-350.00,Groceries",
        "2024-02-01,-200.50,Rent",
    ])

    def test_iso_date(self):
        assert detect_csv_format(self.CSV).date_format == "yyyy-mm-dd"

    def test_comma_delimiter(self):
        assert detect_csv_format(self.CSV).delimiter == ","

    def test_dot_decimal(self):
        assert detect_csv_format(self.CSV).decimal_separator == "."


class TestDelimiter:
    """Valg av skilletegn"""

    def test_tab(self):
        csv = "date\tamount\tdescription\n01.01.2024\t-179,00\tNetflix\n15.01.2024\t45000,00\tLønn"
        assert detect_csv_format(csv).delimiter == "\t"

    def test_semicolon_beats_decimal_commas(self):
        csv = "dato;beloep;tekst\n01.01.2024;-179,00;test\n15.01.2024;45000,00;test2"
        assert detect_csv_format(csv).delimiter == ";"

    def test_comma_dominates(self):
        csv = "date,amount,description,extra\n2024-01-15,1500.00,Salary,work\n2024-01-20,-350.00,Groceries,food"
        assert detect_csv_format(csv).delimiter == ","

    def test_tie_goes_to_semicolon(self):
        delimiter, confident = detect_delimiter(["a;b,c"])
        assert delimiter == ";"
        assert confident is True

    def test_no_delimiter_is_not_confident(self):
        delimiter, confident = detect_delimiter(["abc", "def"])
        assert delimiter == ";"
        assert confident is False


class TestEncoding:
    """Tegnsett-hint"""

    def test_replacement_character(self):
        csv = "date;amount;description\n01.01.2024;-179,00;Caf�"
        assert detect_csv_format(csv).encoding_hint == "ISO-8859-1"

    def test_mojibake(self):
        csv = "date;amount;description\n01.01.2024;-179,00;GrÃ¸nnsaker"
        assert detect_csv_format(csv).encoding_hint == "ISO-8859-1"

    def test_clean_text(self):
        assert detect_csv_format("Dato;Beløp\n01.01.2024;-179,00").encoding_hint == "UTF-8"


class TestEdgeCases:
    """Tomme og rare filer kaster aldri unntak"""

    @pytest.mark.parametrize("raw", ["", None, "\n\n  \n"])
    def test_empty_input(self, raw):
        result = detect_csv_format(raw)
        assert result.delimiter == ";"
        assert result.decimal_separator == ","
        assert result.date_format == "unknown"
        assert result.bank_hint == "unknown"
        assert result.confident is False

    def test_single_line(self):
        assert detect_csv_format('"Dato";"Beløp";"Tekst"').delimiter == ";"

    def test_sample_lines(self):
        lines = ["date;amount;desc"] + [f"01.01.2024;-{i * 100},00;Desc {i}" for i in range(50)]
        result = detect_csv_format("\n".join(lines), 5)
        assert result.delimiter == ";"
        assert result.date_format == "dd.mm.yyyy"

    def test_zero_sample_lines(self):
        result = detect_csv_format(BANK_SAMPLES["dnb"], 0)
        assert result.confident is False
        assert result.bank_hint == "unknown"

    def test_crlf(self):
        csv = '"Dato";"Beløp"\r\n"01.01.2024";"-179,00"\r\n"15.01.2024";"45000,00"'
        result = detect_csv_format(csv)
        assert result.delimiter == ";"
        assert result.date_format == "dd.mm.yyyy"

    def test_unknown_bank(self):
        assert detect_csv_format("col1;col2;col3\n01.01.2024;-100,00;Something").bank_hint == "unknown"

    def test_no_dates(self):
        result = detect_csv_format("description;amount\nNetflix;-179\nSalary;45000")
        assert result.date_format == "unknown"
        assert result.confident is False

    def test_decimal_tie_prefers_comma(self):
        result = detect_csv_format("a;b\n01.01.2024;1,50\n02.01.2024;1.50")
        assert result.decimal_separator == ","
        assert result.confident is False

    def test_date_tie_prefers_norwegian(self):
        result = detect_csv_format("a;b\n01.01.2024;2024-01-01")
        assert result.date_format == "dd.mm.yyyy"


class TestHelpers:
    """Hjelpefunksjoner"""

    def test_split_cells_strips_quotes(self):
        assert split_cells('"Dato";"Beløp"; x ', ";") == ["Dato", "Beløp", "x"]

    def test_bank_from_header(self):
        assert detect_bank("Bokføringsdato;Beløp", ";") == "nordea"
        assert detect_bank('"Dato";"Ut fra konto"', ";") == "sparebank1"
        assert detect_bank("Dato;Forklaringstekst", ";") == "unknown"
