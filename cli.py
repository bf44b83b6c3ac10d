from pathlib import Path

import click

from config.settings import DEFAULT_SAMPLE_LINES, EXCEL_FILE, LOG_LEVEL, SAVINGS_HORIZONS_YEARS
from core.csv_detect import detect_csv_format
from core.csv_import import decode_bank_file, guess_column_mapping, read_bank_csv, to_transactions
from core.errors import CsvImportError, InvalidArgument
from core.loan_math import (
    calc_loan_payoff,
    compute_early_payoff,
    compute_loan_balance,
    compute_monthly_payment,
    generate_amortization_schedule,
)
from core.loan_register import loan_overview
from core.savings_math import calc_savings_projection
from data_manager.data_validator import validate_extra_payment, validate_loan
from data_manager.excel_handler import (
    delete_loan,
    export_schedule_excel,
    get_all_config,
    get_all_loans,
    get_config,
    get_extra_payments,
    save_extra_payment,
    save_loan,
    set_config,
)
from data_manager.schema import ExtraPayment
from utils.date_utils import parse_iso_date
from utils.formatters import format_nok, fmt_months, fmt_percent
from utils.id_generator import generate_loan_id, generate_payment_id
from utils.logging_config import configure_logging

DATE = click.DateTime(formats=["%Y-%m-%d"])


def _parse_extra(ctx, param, values):
    """--extra 2024-03-15:500000 -> ExtraPayment"""
    payments = []
    for value in values:
        paid_on, sep, amount = value.partition(":")
        if not sep:
            raise click.BadParameter(f"expected DATE:OERE, got {value!r}", ctx=ctx, param=param)
        try:
            parse_iso_date(paid_on)
            payments.append(ExtraPayment(date=paid_on, amount_oere=int(amount)))
        except (InvalidArgument, ValueError) as exc:
            raise click.BadParameter(str(exc), ctx=ctx, param=param) from exc
    return payments


def _day(value):
    return value.date() if value is not None else None


@click.group()
@click.option('--log-level', default=LOG_LEVEL, show_default=True, help='Logging level')
@click.option('--excel-file', type=click.Path(path_type=Path), default=EXCEL_FILE, show_default=True,
              help='Workbook with loans and settings')
@click.pass_context
def cli(ctx, log_level, excel_file):
    """Household finance tools: loans, savings and bank CSV import."""
    configure_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj["excel_file"] = excel_file


# ---- Loan engine ----

@cli.command('monthly-payment')
@click.option('--principal', type=int, required=True, help='Principal in øre')
@click.option('--annual-rate', type=float, required=True, help='Nominal annual rate in percent')
@click.option('--term-months', type=int, required=True, help='Loan term in months')
def monthly_payment(principal, annual_rate, term_months):
    """Fixed monthly annuity payment."""
    try:
        payment = compute_monthly_payment(principal, annual_rate, term_months)
    except InvalidArgument as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Monthly payment: {format_nok(payment)} ({payment} øre)")


@cli.command('loan-balance')
@click.option('--principal', type=int, required=True, help='Principal in øre')
@click.option('--annual-rate', type=float, required=True, help='Nominal annual rate in percent')
@click.option('--term-months', type=int, required=True, help='Loan term in months')
@click.option('--start-date', type=str, required=True, help='Start date (YYYY-MM-DD)')
@click.option('--extra', multiple=True, callback=_parse_extra, help='Extra payment DATE:OERE, repeatable')
@click.option('--opening-balance', type=int, help='Known balance in øre at --opening-date')
@click.option('--opening-date', type=str, help='Date of the known balance (YYYY-MM-DD)')
@click.option('--today', type=DATE, help='Evaluate as of this date (YYYY-MM-DD)')
def loan_balance(principal, annual_rate, term_months, start_date, extra, opening_balance, opening_date, today):
    """Current balance after simulating payments up to today."""
    try:
        result = compute_loan_balance(
            principal, annual_rate, term_months, start_date, extra,
            opening_balance, opening_date, today=_day(today),
        )
    except InvalidArgument as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Current balance: {format_nok(result.current_balance_oere)} ({result.current_balance_oere} øre)")
    click.echo(f"Monthly payment: {format_nok(result.monthly_payment_oere)} ({result.monthly_payment_oere} øre)")
    click.echo(f"Remaining: {result.remaining_months} months ({fmt_months(result.remaining_months)})")
    click.echo(f"Principal paid: {fmt_percent(result.principal_paid_pct)}")


@cli.command('early-payoff')
@click.option('--balance', type=int, required=True, help='Current balance in øre')
@click.option('--annual-rate', type=float, required=True, help='Nominal annual rate in percent')
@click.option('--payment', type=int, required=True, help='Regular monthly payment in øre')
@click.option('--extra-monthly', type=int, required=True, help='Extra monthly payment in øre')
def early_payoff(balance, annual_rate, payment, extra_monthly):
    """What if I pay extra every month?"""
    result = compute_early_payoff(balance, annual_rate, payment, extra_monthly)
    if result is None:
        click.echo("No projection possible: loan is paid off or the payment does not cover interest.")
        return
    click.echo(f"Regular payoff: {result.regular_months} months")
    click.echo(f"With extra: {result.new_months} months")
    click.echo(f"Months saved: {result.months_saved}")
    click.echo(f"Interest saved: {format_nok(result.interest_saved_oere)} ({result.interest_saved_oere} øre)")


@cli.command()
@click.option('--balance', type=int, required=True, help='Balance in øre')
@click.option('--annual-rate', type=float, required=True, help='Nominal annual rate in percent')
@click.option('--payment', type=int, required=True, help='Monthly payment in øre')
@click.option('--today', type=DATE, help='Count months from this date (YYYY-MM-DD)')
def payoff(balance, annual_rate, payment, today):
    """Payoff time and total cost for a fixed monthly payment."""
    result = calc_loan_payoff(balance, annual_rate, payment, today=_day(today))
    if result.months is None:
        click.echo("The payment never pays off the loan.")
        return
    click.echo(f"Months: {result.months} ({fmt_months(result.months)})")
    click.echo(f"Payoff date: {result.payoff_date.isoformat()}")
    click.echo(f"Total interest: {format_nok(result.total_interest_oere)} ({result.total_interest_oere} øre)")
    click.echo(f"Total paid: {format_nok(result.total_paid_oere)} ({result.total_paid_oere} øre)")


@cli.command()
@click.option('--principal', type=int, required=True, help='Principal in øre')
@click.option('--annual-rate', type=float, required=True, help='Nominal annual rate in percent')
@click.option('--term-months', type=int, required=True, help='Loan term in months')
@click.option('--start-date', type=str, required=True, help='Start date (YYYY-MM-DD)')
@click.option('--extra', multiple=True, callback=_parse_extra, help='Extra payment DATE:OERE, repeatable')
@click.option('--opening-balance', type=int, help='Known balance in øre at --opening-date')
@click.option('--opening-date', type=str, help='Date of the known balance (YYYY-MM-DD)')
@click.option('--max-months', type=int, help='Only the first N months')
@click.option('--excel', 'excel_path', type=click.Path(path_type=Path), help='Write to this .xlsx instead of CSV')
def schedule(principal, annual_rate, term_months, start_date, extra, opening_balance, opening_date, max_months, excel_path):
    """Month-by-month amortization schedule as CSV (or Excel)."""
    try:
        df = generate_amortization_schedule(
            principal, annual_rate, term_months, start_date, extra,
            opening_balance, opening_date, max_months=max_months,
        )
    except InvalidArgument as exc:
        raise click.ClickException(str(exc)) from exc
    if excel_path:
        export_schedule_excel(df, excel_path)
        click.echo(f"Wrote {len(df)} rows to {excel_path}")
    else:
        click.echo(df.to_csv(index=False), nl=False)


@cli.command()
@click.option('--initial', type=int, default=0, show_default=True, help='Starting amount in øre')
@click.option('--monthly', type=int, required=True, help='Monthly contribution in øre')
@click.option('--annual-return', type=float, required=True, help='Expected annual return in percent')
@click.option('--years', type=int, multiple=True, help='Horizon in years, repeatable')
def savings(initial, monthly, annual_return, years):
    """Projected savings value with monthly compounding."""
    for horizon in years or SAVINGS_HORIZONS_YEARS:
        value = calc_savings_projection(initial, monthly, annual_return, horizon)
        click.echo(f"{horizon} years: {format_nok(value)} ({value} øre)")


# ---- Bank CSV ----

def _read_text(path: Path, encoding) -> str:
    return decode_bank_file(path.read_bytes(), encoding)


@cli.command('detect-csv')
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--sample-lines', type=int, default=DEFAULT_SAMPLE_LINES, show_default=True, help='Lines to inspect')
@click.option('--encoding', type=str, help='Force a text encoding instead of guessing')
def detect_csv(file, sample_lines, encoding):
    """Guess delimiter, decimal separator, date format, encoding and bank."""
    result = detect_csv_format(_read_text(file, encoding), sample_lines)
    click.echo(f"delimiter: {result.delimiter!r}")
    click.echo(f"decimal_separator: {result.decimal_separator!r}")
    click.echo(f"date_format: {result.date_format}")
    click.echo(f"encoding_hint: {result.encoding_hint}")
    click.echo(f"bank_hint: {result.bank_hint}")
    click.echo(f"confident: {result.confident}")


@cli.command('import-csv')
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--encoding', type=str, help='Force a text encoding instead of guessing')
@click.option('--date-column', type=str, help='Override the guessed date column')
@click.option('--amount-column', type=str, help='Override the guessed amount column')
@click.option('--description-column', type=str, help='Override the guessed description column')
def import_csv(file, encoding, date_column, amount_column, description_column):
    """Normalize a bank statement to date,amount_oere,description CSV."""
    try:
        detection, frame = read_bank_csv(_read_text(file, encoding))
        mapping = guess_column_mapping(list(frame.columns))
        for field, override in (("date", date_column), ("amount", amount_column),
                                ("description", description_column)):
            if override:
                mapping[field] = override
        transactions = to_transactions(frame, mapping, detection.decimal_separator)
    except CsvImportError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(transactions.to_csv(index=False), nl=False)


# ---- Loan register ----

@cli.command('list-loans')
@click.option('--today', type=DATE, help='Evaluate as of this date (YYYY-MM-DD)')
@click.pass_context
def list_loans(ctx, today):
    """Lists stored loans with their current balance."""
    path = ctx.obj["excel_file"]
    loans = get_all_loans(path)
    if loans.empty:
        click.echo("No loans stored.")
        return
    overview = loan_overview(loans, get_extra_payments(filepath=path), today=_day(today))
    for _, row in overview.iterrows():
        click.echo(
            f"{row['loan_id']}  {row['name']}: {format_nok(int(row['current_balance_oere']))}, "
            f"{format_nok(int(row['monthly_payment_oere']))}/mnd, {fmt_months(int(row['remaining_months']))} left"
        )


@cli.command('add-loan')
@click.option('--name', type=str, required=True, help='Loan name')
@click.option('--principal', type=int, required=True, help='Principal in øre')
@click.option('--annual-rate', type=float, required=True, help='Nominal annual rate in percent')
@click.option('--term-months', type=int, required=True, help='Loan term in months')
@click.option('--start-date', type=DATE, required=True, help='Start date (YYYY-MM-DD)')
@click.option('--opening-balance', type=int, help='Known balance in øre at --opening-date')
@click.option('--opening-date', type=DATE, help='Date of the known balance (YYYY-MM-DD)')
@click.option('--notes', type=str, default='', help='Notes')
@click.pass_context
def add_loan(ctx, name, principal, annual_rate, term_months, start_date, opening_balance, opening_date, notes):
    """Adds a loan to the workbook."""
    start, opening_day = _day(start_date), _day(opening_date)
    ok, msg = validate_loan(name, principal, annual_rate, term_months, start, opening_balance, opening_day)
    if not ok:
        raise click.ClickException(msg)
    loan_id = generate_loan_id()
    save_loan({
        'loan_id': loan_id,
        'name': name,
        'principal_oere': principal,
        'annual_rate_pct': annual_rate,
        'term_months': term_months,
        'start_date': start.isoformat(),
        'opening_balance_oere': opening_balance,
        'opening_balance_date': opening_day.isoformat() if opening_day else None,
        'notes': notes,
    }, ctx.obj["excel_file"])
    click.echo(f"Loan '{loan_id}' added.")


@cli.command('delete-loan')
@click.option('--loan-id', type=str, required=True, help='Loan ID')
@click.pass_context
def delete_loan_command(ctx, loan_id):
    """Deletes a loan and its extra payments."""
    delete_loan(loan_id, ctx.obj["excel_file"])
    click.echo(f"Loan '{loan_id}' deleted.")


@cli.command('add-extra-payment')
@click.option('--loan-id', type=str, required=True, help='Loan ID')
@click.option('--date', 'paid_on', type=DATE, required=True, help='Payment date (YYYY-MM-DD)')
@click.option('--amount', type=int, required=True, help='Amount in øre')
@click.option('--notes', type=str, default='', help='Notes')
@click.pass_context
def add_extra_payment(ctx, loan_id, paid_on, amount, notes):
    """Registers an extra payment on a stored loan."""
    ok, msg = validate_extra_payment(amount, _day(paid_on))
    if not ok:
        raise click.ClickException(msg)
    payment_id = generate_payment_id()
    save_extra_payment({
        'payment_id': payment_id,
        'loan_id': loan_id,
        'date': _day(paid_on).isoformat(),
        'amount_oere': amount,
        'notes': notes,
    }, ctx.obj["excel_file"])
    click.echo(f"Extra payment '{payment_id}' added.")


@cli.command('list-configs')
@click.pass_context
def list_configs(ctx):
    """Lists all settings."""
    click.echo(get_all_config(ctx.obj["excel_file"]).to_string())


@cli.command('get-config')
@click.option('--key', type=str, required=True, help='Config key')
@click.pass_context
def get_config_command(ctx, key):
    """Gets a setting by its key."""
    value = get_config(key, ctx.obj["excel_file"])
    if value is not None:
        click.echo(value)
    else:
        click.echo(f"Config with key '{key}' not found.")


@cli.command('set-config')
@click.option('--key', type=str, required=True, help='Config key')
@click.option('--value', type=str, required=True, help='Config value')
@click.option('--description', type=str, default='', help='Description')
@click.pass_context
def set_config_command(ctx, key, value, description):
    """Sets a setting."""
    set_config(key, value, description, ctx.obj["excel_file"])
    click.echo(f"Config with key '{key}' set.")


if __name__ == "__main__":
    cli()
