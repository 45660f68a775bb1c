"""Typer CLI interface for Dreistrom."""

import logging
from datetime import date
from decimal import Decimal
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from dreistrom.models.enums import IncomeStream

DEFAULT_DB = Path.home() / ".dreistrom" / "dreistrom.db"
TAX_TIMEZONE = "Europe/Berlin"

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="dreistrom",
    help="Dreistrom: German income tax and threshold monitoring for mixed income streams.",
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Dreistrom: German income tax and threshold monitoring for mixed income streams."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _parse_date(value: str, option: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        typer.echo(f"Error: Invalid date for {option}: '{value}'. Use YYYY-MM-DD.", err=True)
        raise typer.Exit(1)


def _system_clock():
    from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

    from dreistrom.clock import SystemClock

    try:
        return SystemClock(ZoneInfo(TAX_TIMEZONE))
    except ZoneInfoNotFoundError:
        logger.warning("Time zone %s unavailable, using UTC calendar dates", TAX_TIMEZONE)
        return SystemClock()


def _require_db(db: Path) -> None:
    if not db.exists():
        typer.echo("Error: No database found. Record income first with `dreistrom record-income`.", err=True)
        raise typer.Exit(1)


def _load_settings(config: Path | None):
    from dreistrom.config import load_settings

    if config is not None and not config.exists():
        typer.echo(f"Error: Config file not found: {config}", err=True)
        raise typer.Exit(1)
    return load_settings(config)


@app.command()
def tax(
    taxable_income: float = typer.Argument(..., help="Zu versteuerndes Einkommen in EUR"),
    year: int = typer.Option(2025, "--year", "-y", help="Tax year"),
) -> None:
    """Compute income tax, solidarity surcharge and marginal rate for a zvE."""
    from dreistrom.engines.income_tax import IncomeTaxCalculator
    from dreistrom.engines.tax_params import params_for_year
    from dreistrom.exceptions import TaxComputationError

    calc = IncomeTaxCalculator()
    params = params_for_year(year)
    try:
        income_tax = calc.compute_tax(Decimal(str(taxable_income)), params)
    except TaxComputationError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)
    soli = calc.compute_surcharge(income_tax, params)

    typer.echo(f"Tax year:              {year} (parameters {params.year})")
    typer.echo(f"Taxable income:        {Decimal(str(taxable_income)):,.2f} EUR")
    typer.echo(f"Income tax:            {income_tax:,.2f} EUR")
    typer.echo(f"Solidarity surcharge:  {soli:,.2f} EUR")
    typer.echo(f"Total:                 {income_tax + soli:,.2f} EUR")
    typer.echo(f"Marginal rate:         {calc.compute_marginal_rate(Decimal(str(taxable_income)), params)}%")


@app.command()
def assess(
    year: int = typer.Argument(..., help="Tax year"),
    employment: float = typer.Option(0, "--employment", help="Employment income (EUR)"),
    freiberuf: float = typer.Option(0, "--freiberuf", help="Freiberuf income (EUR)"),
    gewerbe: float = typer.Option(0, "--gewerbe", help="Gewerbe income (EUR)"),
    freiberuf_expenses: float = typer.Option(0, "--freiberuf-expenses", help="Freiberuf expenses (EUR)"),
    gewerbe_expenses: float = typer.Option(0, "--gewerbe-expenses", help="Gewerbe expenses (EUR)"),
    hebesatz: int | None = typer.Option(None, "--hebesatz", help="Municipal Hebesatz for Gewerbesteuer"),
    config: Path | None = typer.Option(None, "--config", help="Engine settings JSON file"),
) -> None:
    """Full income tax assessment across all three income streams."""
    from dreistrom.engines.gewerbesteuer import GewerbesteuerCalculator
    from dreistrom.engines.income_tax import IncomeTaxCalculator

    settings = _load_settings(config)
    result = IncomeTaxCalculator().assess(
        year,
        employment_income=Decimal(str(employment)),
        freiberuf_income=Decimal(str(freiberuf)),
        gewerbe_income=Decimal(str(gewerbe)),
        freiberuf_expenses=Decimal(str(freiberuf_expenses)),
        gewerbe_expenses=Decimal(str(gewerbe_expenses)),
    )

    typer.echo(f"=== Tax Assessment {year} ===")
    typer.echo(f"Gross income:          {result.total_gross:,.2f} EUR")
    typer.echo(f"Deductions:            {result.deductions.total:,.2f} EUR")
    typer.echo(f"Taxable income (zvE):  {result.taxable_income:,.2f} EUR")
    typer.echo(f"Income tax:            {result.income_tax:,.2f} EUR")
    typer.echo(f"Solidarity surcharge:  {result.solidarity_surcharge:,.2f} EUR")
    typer.echo(f"Total tax:             {result.total_tax:,.2f} EUR")
    typer.echo(f"Marginal rate:         {result.marginal_rate}%")
    typer.echo(f"Effective rate:        {result.effective_rate}%")

    if gewerbe > 0:
        gewst = GewerbesteuerCalculator(settings).compute(
            Decimal(str(gewerbe)),
            Decimal(str(gewerbe_expenses)),
            result.income_tax,
            hebesatz,
        )
        typer.echo("")
        typer.echo(f"=== Gewerbesteuer (Hebesatz {gewst.hebesatz}%) ===")
        typer.echo(f"Gewerbeertrag:         {gewst.profit:,.2f} EUR")
        typer.echo(f"Steuermessbetrag:      {gewst.messbetrag:,.2f} EUR")
        typer.echo(f"Gewerbesteuer:         {gewst.gewerbesteuer:,.2f} EUR")
        typer.echo(f"§35 credit:            {gewst.paragraph_35_credit:,.2f} EUR")
        typer.echo(f"Net burden:            {gewst.net_burden:,.2f} EUR")


@app.command()
def vat(
    amount: float = typer.Argument(..., help="Amount in EUR (gross unless --from-net)"),
    rate: float = typer.Option(19, "--rate", "-r", help="VAT rate in percent"),
    from_net: bool = typer.Option(False, "--from-net", help="Treat the amount as net"),
) -> None:
    """Convert between gross, net and VAT."""
    from dreistrom.engines.vat import VatConverter
    from dreistrom.exceptions import DataValidationError

    converter = VatConverter()
    value = Decimal(str(amount))
    rate_dec = Decimal(str(rate))
    try:
        if from_net:
            gross = converter.gross_from_net(value, rate_dec)
            net = value
        else:
            gross = value
            net = converter.net_from_gross(value, rate_dec)
        vat_share = converter.extract_vat(gross, rate_dec)
    except DataValidationError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Net:    {net:,.2f} EUR")
    typer.echo(f"VAT:    {vat_share:,.2f} EUR ({rate_dec}%)")
    typer.echo(f"Gross:  {gross:,.2f} EUR")


@app.command()
def afa(
    net_cost: float = typer.Argument(..., help="Net acquisition cost in EUR"),
    acquired: str = typer.Option(..., "--acquired", help="Acquisition date (YYYY-MM-DD)"),
    months: int = typer.Option(36, "--months", "-m", min=1, help="Useful life in months"),
    disposed: str | None = typer.Option(None, "--disposed", help="Disposal date (YYYY-MM-DD)"),
) -> None:
    """Print the straight-line depreciation schedule of an asset."""
    from pydantic import ValidationError

    from dreistrom.engines.depreciation import DepreciationCalculator
    from dreistrom.models.assets import DepreciationAsset

    try:
        asset = DepreciationAsset(
            user_id=0,
            name="asset",
            acquisition_date=_parse_date(acquired, "--acquired"),
            net_cost=Decimal(str(net_cost)),
            useful_life_months=months,
            disposal_date=_parse_date(disposed, "--disposed") if disposed else None,
        )
    except ValidationError as exc:
        typer.echo(f"Error: {exc.errors()[0]['msg']}", err=True)
        raise typer.Exit(1)

    calc = DepreciationCalculator()
    if calc.is_gwg(asset.net_cost):
        typer.echo(f"Note: {asset.net_cost:,.2f} EUR is within the GWG limit and may be expensed at once.")

    table = Table(title=f"AfA schedule: {asset.net_cost:,.2f} EUR over {months} months")
    table.add_column("Year", justify="right")
    table.add_column("Depreciation", justify="right")
    table.add_column("Book value", justify="right")
    table.add_column("Disposal write-off", justify="right")
    for entry in calc.compute_schedule(asset):
        table.add_row(
            str(entry.year),
            f"{entry.depreciation:,.2f}",
            f"{entry.remaining_book_value:,.2f}",
            f"{entry.disposal_write_off:,.2f}" if entry.disposal_write_off else "",
        )
    Console().print(table)


@app.command(name="record-income")
def record_income(
    stream: IncomeStream = typer.Argument(..., help="EMPLOYMENT, FREIBERUF or GEWERBE"),
    amount: float = typer.Argument(..., help="Amount in EUR"),
    user: int = typer.Option(1, "--user", "-u", help="User ID"),
    on: str | None = typer.Option(None, "--date", help="Entry date (YYYY-MM-DD), default today"),
    source: str | None = typer.Option(None, "--source", help="Client or employer"),
    db: Path = typer.Option(DEFAULT_DB, "--db", help="Path to the SQLite database file"),
    config: Path | None = typer.Option(None, "--config", help="Engine settings JSON file"),
) -> None:
    """Record an income entry and report any thresholds it triggers."""
    from pydantic import ValidationError

    from dreistrom.bookkeeping import Bookkeeper
    from dreistrom.db.repository import LedgerRepository
    from dreistrom.db.schema import create_schema
    from dreistrom.events import EventBus
    from dreistrom.models.entries import IncomeEntry
    from dreistrom.monitoring.dispatcher import (
        LoggingAlertDispatcher,
        RecordingAlertDispatcher,
        with_cooldown,
    )
    from dreistrom.monitoring.monitor import ThresholdMonitor

    settings = _load_settings(config)
    clock = _system_clock()
    entry_date = _parse_date(on, "--date") if on else clock.today()
    try:
        entry = IncomeEntry(
            user_id=user,
            stream=stream,
            amount=Decimal(str(amount)),
            entry_date=entry_date,
            source=source,
        )
    except ValidationError as exc:
        typer.echo(f"Error: {exc.errors()[0]['msg']}", err=True)
        raise typer.Exit(1)

    conn = create_schema(db)
    try:
        repo = LedgerRepository(conn)
        bus = EventBus()
        ThresholdMonitor(repo, repo, bus, clock, settings).register()
        recorder = RecordingAlertDispatcher()
        recorder.connect(bus)
        with_cooldown(LoggingAlertDispatcher(), clock, settings).connect(bus)
        saved = Bookkeeper(repo, bus, clock, settings).record_income(entry)
    finally:
        conn.close()

    typer.echo(f"Recorded {saved.stream.value} income of {saved.amount:,.2f} EUR on {saved.entry_date} (id {saved.id})")
    for alert in recorder.alerts:
        typer.echo(
            f"ALERT {alert.type.value}: ratio {alert.ratio}, amount {alert.reference_amount:,.2f} EUR"
        )


@app.command()
def thresholds(
    year: int = typer.Argument(..., help="Tax year"),
    user: int = typer.Option(1, "--user", "-u", help="User ID"),
    db: Path = typer.Option(DEFAULT_DB, "--db", help="Path to the SQLite database file"),
    config: Path | None = typer.Option(None, "--config", help="Engine settings JSON file"),
) -> None:
    """Evaluate all threshold rules for a user and year without recording anything."""
    from dreistrom.db.repository import LedgerRepository
    from dreistrom.db.schema import create_schema
    from dreistrom.events import EventBus
    from dreistrom.monitoring.monitor import ThresholdMonitor

    _require_db(db)
    settings = _load_settings(config)
    conn = create_schema(db)
    try:
        repo = LedgerRepository(conn)
        alerts = ThresholdMonitor(repo, repo, EventBus(), _system_clock(), settings).evaluate(user, year)
    finally:
        conn.close()

    if not alerts:
        typer.echo(f"No thresholds reached for user {user} in {year}.")
        return

    table = Table(title=f"Thresholds {year} (user {user})")
    table.add_column("Threshold")
    table.add_column("Ratio", justify="right")
    table.add_column("Amount (EUR)", justify="right")
    for alert in alerts:
        table.add_row(alert.type.value, str(alert.ratio), f"{alert.reference_amount:,.2f}")
    Console().print(table)


@app.command()
def kleinunternehmer(
    year: int = typer.Argument(..., help="Tax year"),
    user: int = typer.Option(1, "--user", "-u", help="User ID"),
    db: Path = typer.Option(DEFAULT_DB, "--db", help="Path to the SQLite database file"),
    config: Path | None = typer.Option(None, "--config", help="Engine settings JSON file"),
) -> None:
    """Show revenue against both §19 UStG limits."""
    from dreistrom.db.repository import LedgerRepository
    from dreistrom.db.schema import create_schema
    from dreistrom.reports.kleinunternehmer import KleinunternehmerStatusService

    _require_db(db)
    settings = _load_settings(config)
    conn = create_schema(db)
    try:
        status = KleinunternehmerStatusService(
            LedgerRepository(conn), _system_clock(), settings
        ).get_status(user, year)
    finally:
        conn.close()

    table = Table(title=f"Kleinunternehmer {year} (user {user})")
    table.add_column("")
    table.add_column("Revenue (EUR)", justify="right")
    table.add_column("Limit (EUR)", justify="right")
    table.add_column("Ratio", justify="right")
    table.add_column("Exceeded")
    table.add_row(
        "Current year", f"{status.current_revenue:,.2f}", f"{status.current_year_limit:,.2f}",
        str(status.current_ratio), "yes" if status.current_exceeded else "no",
    )
    table.add_row(
        "Projected", f"{status.projected_revenue:,.2f}", f"{status.projected_year_limit:,.2f}",
        str(status.projected_ratio), "yes" if status.projected_exceeded else "no",
    )
    Console().print(table)


@app.command(name="vat-summary")
def vat_summary(
    start: str = typer.Option(..., "--from", help="Period start (YYYY-MM-DD)"),
    end: str = typer.Option(..., "--to", help="Period end (YYYY-MM-DD)"),
    user: int = typer.Option(1, "--user", "-u", help="User ID"),
    small_business: bool = typer.Option(
        False, "--kleinunternehmer", help="User applies §19 UStG (no VAT charged)"
    ),
    db: Path = typer.Option(DEFAULT_DB, "--db", help="Path to the SQLite database file"),
    config: Path | None = typer.Option(None, "--config", help="Engine settings JSON file"),
) -> None:
    """Output VAT, input VAT and the amount payable for a period."""
    from dreistrom.db.repository import LedgerRepository
    from dreistrom.db.schema import create_schema
    from dreistrom.exceptions import DataValidationError
    from dreistrom.reports.vat_summary import VatSummaryCalculator

    period_start = _parse_date(start, "--from")
    period_end = _parse_date(end, "--to")
    _require_db(db)
    settings = _load_settings(config)
    conn = create_schema(db)
    try:
        summary = VatSummaryCalculator(LedgerRepository(conn), settings).calculate(
            user, period_start, period_end, kleinunternehmer=small_business
        )
    except DataValidationError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)
    finally:
        conn.close()

    table = Table(title=f"Umsatzsteuer {period_start} to {period_end}")
    table.add_column("")
    table.add_column("Freiberuf (EUR)", justify="right")
    table.add_column("Gewerbe (EUR)", justify="right")
    table.add_column("Total (EUR)", justify="right")
    table.add_row(
        "Output VAT", f"{summary.freiberuf_output_vat:,.2f}",
        f"{summary.gewerbe_output_vat:,.2f}", f"{summary.output_vat:,.2f}",
    )
    table.add_row(
        "Input VAT", f"{summary.freiberuf_input_vat:,.2f}",
        f"{summary.gewerbe_input_vat:,.2f}", f"{summary.input_vat:,.2f}",
    )
    Console().print(table)
    typer.echo(f"Net payable: {summary.net_payable:,.2f} EUR")


@app.command()
def reserve(
    year: int = typer.Argument(..., help="Tax year"),
    user: int = typer.Option(1, "--user", "-u", help="User ID"),
    reserved: float = typer.Option(0.0, "--reserved", help="Amount already set aside in EUR"),
    basis: float | None = typer.Option(
        None, "--basis", help="Vorauszahlung assessment basis in EUR, to check for drift"
    ),
    db: Path = typer.Option(DEFAULT_DB, "--db", help="Path to the SQLite database file"),
    config: Path | None = typer.Option(None, "--config", help="Engine settings JSON file"),
) -> None:
    """Suggest a monthly tax reserve transfer and check prepayments."""
    from dreistrom.db.repository import LedgerRepository
    from dreistrom.db.schema import create_schema
    from dreistrom.exceptions import DataValidationError
    from dreistrom.reports.reserve import PrepaymentChecker, TaxReserveCalculator

    _require_db(db)
    settings = _load_settings(config)
    clock = _system_clock()
    conn = create_schema(db)
    try:
        repo = LedgerRepository(conn)
        rec = TaxReserveCalculator(repo, clock, settings).calculate(
            user, year, Decimal(str(reserved))
        )
        adjustment = (
            PrepaymentChecker(repo, clock, settings).check_deviation(user, year, Decimal(str(basis)))
            if basis is not None
            else None
        )
    except DataValidationError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)
    finally:
        conn.close()

    typer.echo(f"Net self-employed profit: {rec.net_profit:,.2f} EUR")
    typer.echo(f"Annual reserve ({rec.reserve_rate}%): {rec.annual_reserve:,.2f} EUR")
    typer.echo(f"Remaining: {rec.remaining:,.2f} EUR over {rec.months_remaining} month(s)")
    typer.echo(f"Monthly transfer: {rec.monthly_reserve:,.2f} EUR")
    if adjustment is not None:
        if adjustment.recommended:
            typer.echo(
                f"Vorauszahlung adjustment recommended: deviation {adjustment.deviation_percent}%, "
                f"suggested quarterly {adjustment.suggested_quarterly:,.2f} EUR"
            )
        else:
            typer.echo(f"Vorauszahlungen on track (deviation {adjustment.deviation_percent}%)")


if __name__ == "__main__":
    app()
