class InvalidArgument(ValueError):
    """Ugyldig tall- eller datoinput til lånemotoren."""


class CsvImportError(ValueError):
    """CSV-filen kunne ikke leses som en tabell."""
