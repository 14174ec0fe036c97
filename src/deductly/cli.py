"""Deductly CLI interface.

Reads a JSON ledger snapshot from disk and prints the T2125 statement, the
dashboard summary or the deduction estimate. Nothing is written back.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ValidationError

from deductly import __version__
from deductly.core.config import get_settings
from deductly.core.logging_config import setup_logging
from deductly.models.ledger import LedgerSnapshot
from deductly.models.summary import PeriodFilter
from deductly.models.t2125 import T2125Line
from deductly.services.cca import calculate_cca, prescribed_rate
from deductly.services.currency import ZERO, format_currency, format_percent
from deductly.services.summary import category_totals, summary_totals, total_income
from deductly.services.t2125_mapper import generate_t2125_for_ledger
from deductly.services.tax_estimator import calculate_tax_estimate
from deductly.services.validation import LedgerValidationError, validate_cca_cost

if TYPE_CHECKING:
    from deductly.models.report import T2125Data
    from deductly.models.tax import CCAResult, TaxEstimate

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CANCELLED = 130


class CLIError(Exception):
    """Base exception for CLI errors."""


class LedgerFileError(CLIError):
    """Ledger file could not be read or parsed."""


def load_ledger(path: Path) -> LedgerSnapshot:
    """Read a ledger snapshot from a JSON file."""
    if not path.exists():
        raise LedgerFileError(f"Ledger file not found: {path}")
    if not path.is_file():
        raise LedgerFileError(f"Not a file: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise LedgerFileError(f"Invalid JSON in {path}: {e}") from e

    try:
        return LedgerSnapshot.model_validate(data)
    except ValidationError as e:
        raise LedgerFileError(f"Invalid ledger snapshot in {path}: {e}") from e


def period_from_args(args: argparse.Namespace) -> PeriodFilter | None:
    """Build the period filter selected by ``--year``/``--month``."""
    year = getattr(args, "year", None)
    month = getattr(args, "month", None)
    if year is None and month is None:
        return None
    return PeriodFilter(year=year, month=month)


def to_json(result: BaseModel) -> str:
    """Serialize a result the way the HTTP API does."""
    return json.dumps(
        result.model_dump(mode="json", by_alias=True), indent=2, default=str
    )


def _money_line(label: str, amount: Decimal) -> str:
    return f"  {label:<44} ${format_currency(amount):>12}"


def format_t2125(report: T2125Data) -> str:
    """Human-readable rendering of a T2125 statement."""
    ident = report.identification
    income = report.part3c_income
    part4 = report.part4_expenses
    chart_a = report.chart_a_motor_vehicle
    net = report.part5_net_income
    lines = [
        f"\n=== T2125 Statement of Business Activities ({report.tax_year}) ===",
        f"Name: {ident.your_name or '-'}",
        f"Business: {ident.business_name or '-'} ({ident.industry_code})",
        f"Fiscal period: {ident.fiscal_period_start} to {ident.fiscal_period_end}",
        "\n=== Part 3 - Business Income ===",
        _money_line("3A Gross sales", report.part3a_business_income.gross_sales),
        _money_line(
            "3B GST/HST collected", report.part3a_business_income.gst_hst_collected
        ),
        _money_line("8230 Other income", income.other_income),
        _money_line("8299 Gross business income", income.gross_business_income),
        "\n=== Part 4 - Expenses ===",
    ]
    for line in T2125Line:
        amount = getattr(part4, line.field_name)
        if amount:
            lines.append(_money_line(f"{line.value} {line.description}", amount))
    lines.extend(
        [
            _money_line("9368 Total expenses", part4.total_expenses),
            "\n=== Chart A - Motor Vehicle ===",
            f"  Business use: {format_percent(chart_a.business_use_percent)}%",
            _money_line("Allowable motor vehicle expenses", chart_a.allowable_expenses),
            "\n=== Part 5 - Net Income ===",
            _money_line(
                "9369 Net income before adjustments",
                net.net_income_before_adjustments,
            ),
            _money_line("9945 Business use of home", net.business_use_of_home),
            _money_line("9946 Net income", net.your_net_income),
        ]
    )
    if report.warnings:
        lines.append("\n=== Warnings ===")
        lines.extend(f"  ! {warning}" for warning in report.warnings)
    return "\n".join(lines)


def format_estimate(estimate: TaxEstimate) -> str:
    """Human-readable rendering of a deduction estimate."""
    return "\n".join(
        [
            "\n=== Deduction Estimate ===",
            _money_line("Total income", estimate.total_income),
            _money_line("Meals (50%)", estimate.meals_50_percent),
            _money_line("Motor vehicle", estimate.motor_vehicle_expenses),
            _money_line("Home office", estimate.home_office_deduction),
            _money_line("CCA", estimate.cca_deduction),
            _money_line("Other deductions", estimate.other_deductions),
            _money_line("Total deductions", estimate.total_deductions),
            f"  Business use: {format_percent(estimate.business_use_percent)}%",
            f"  Marginal rate: {format_percent(estimate.marginal_rate * 100)}%",
            _money_line("Estimated tax savings", estimate.estimated_tax_savings),
        ]
    )


def format_cca(result: CCAResult) -> str:
    """Human-readable rendering of one CCA computation."""
    return "\n".join(
        [
            "\n=== Capital Cost Allowance ===",
            _money_line("Eligible base", result.base),
            _money_line("CCA deduction", result.cca_deduction),
            _money_line("Closing UCC", result.closing_ucc),
        ]
    )


class DeductlyCLI:
    """Main CLI application class."""

    def __init__(self) -> None:
        """Initialize the CLI application."""
        self.settings = get_settings()

    def t2125_command(self, args: argparse.Namespace) -> str:
        """Handle the t2125 command."""
        snapshot = load_ledger(Path(args.ledger))
        home_office_percent = (
            args.home_office_percent
            if args.home_office_percent is not None
            else self.settings.home_office_percent
        )
        report = generate_t2125_for_ledger(
            snapshot,
            tax_year=args.tax_year,
            home_office_percent=home_office_percent,
            default_province=self.settings.default_province,
        )
        if args.output == "json":
            return to_json(report)
        return format_t2125(report)

    def summary_command(self, args: argparse.Namespace) -> str:
        """Handle the summary command."""
        snapshot = load_ledger(Path(args.ledger))
        period = period_from_args(args)
        totals = summary_totals(
            snapshot.expenses, snapshot.income, snapshot.mileage, period
        )
        categories = category_totals(snapshot.expenses, period)
        if args.output == "json":
            return json.dumps(
                {
                    "totals": totals.model_dump(mode="json"),
                    "categories": [c.model_dump(mode="json") for c in categories],
                },
                indent=2,
                default=str,
            )

        lines = [
            "\n=== Summary ===",
            _money_line("Total income", totals.total_income),
            _money_line("Total expenses", totals.total_expenses),
            _money_line("Total deductible", totals.total_deductible),
            _money_line("Net income", totals.net_income),
            f"  Mileage: {totals.business_mileage} business of "
            f"{totals.total_mileage} km",
        ]
        if categories:
            lines.append("\n=== By Category ===")
            lines.extend(
                f"  {c.category_label:<30} {c.count:>4}  "
                f"${format_currency(c.deductible):>12}"
                for c in categories
            )
        return "\n".join(lines)

    def estimate_command(self, args: argparse.Namespace) -> str:
        """Handle the estimate command."""
        snapshot = load_ledger(Path(args.ledger))
        period = period_from_args(args)
        home_office_percent = (
            args.home_office_percent
            if args.home_office_percent is not None
            else self.settings.home_office_percent
        )
        estimate = calculate_tax_estimate(
            snapshot.expenses,
            total_income(snapshot.income, period),
            snapshot.mileage,
            snapshot.assets,
            home_office_percent=home_office_percent,
            brackets=self.settings.tax_brackets,
            default_rate=self.settings.tax_default_rate,
            period=period,
        )
        if args.output == "json":
            return to_json(estimate)
        return format_estimate(estimate)

    def cca_command(self, args: argparse.Namespace) -> str:
        """Handle the cca command."""
        cost = validate_cca_cost(args.cost, field="cost")
        rate = args.rate if args.rate is not None else prescribed_rate(args.asset_class)
        result = calculate_cca(
            cost,
            args.opening_ucc,
            rate,
            half_year_rule=not args.no_half_year,
        )
        if args.output == "json":
            return to_json(result)
        return format_cca(result)

    def run(self, args: argparse.Namespace) -> int:
        """Dispatch a parsed command and print its output."""
        commands = {
            "t2125": self.t2125_command,
            "summary": self.summary_command,
            "estimate": self.estimate_command,
            "cca": self.cca_command,
        }
        try:
            output = commands[args.command](args)
        except (CLIError, LedgerValidationError) as e:
            print(f"\nError: {e}", file=sys.stderr)  # noqa: T201
            return EXIT_ERROR
        except ValidationError as e:
            print(f"\nInvalid input: {e}", file=sys.stderr)  # noqa: T201
            return EXIT_ERROR

        print(output)  # noqa: T201
        return EXIT_OK


def decimal_arg(value: str) -> Decimal:
    """Argparse type for exact decimal amounts."""
    try:
        parsed = Decimal(value)
    except InvalidOperation as e:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from e
    if not parsed.is_finite():
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    return parsed


def fraction_arg(value: str) -> Decimal:
    """Argparse type for a share between 0 and 1."""
    parsed = decimal_arg(value)
    if not ZERO <= parsed <= 1:
        raise argparse.ArgumentTypeError(
            f"must be a fraction between 0 and 1, got {value!r}"
        )
    return parsed


def _add_output_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )


def _add_period_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--year", type=int, help="Only include this calendar year")
    parser.add_argument(
        "--month",
        type=int,
        choices=range(1, 13),
        metavar="{1..12}",
        help="Only include this month",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="deductly",
        description="Deductly CLI - CRA T2125 statements from a ledger snapshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  deductly t2125 ledger.json
  deductly t2125 ledger.json --tax-year 2024 --output json
  deductly summary ledger.json --year 2024 --month 3
  deductly estimate ledger.json --home-office-percent 0.15
  deductly cca --cost 30000 --opening-ucc 30000

The ledger file is a JSON object with the keys profile, expenses, income,
mileage, assets, mileage_settings and cca_override.
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"deductly {__version__}",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(
        dest="command", required=True, help="Available commands"
    )

    # T2125 command
    t2125_parser = subparsers.add_parser(
        "t2125",
        help="Generate the T2125 statement",
        description="Map a ledger snapshot onto the CRA T2125 form lines",
    )
    t2125_parser.add_argument("ledger", type=str, help="Path to the ledger JSON file")
    t2125_parser.add_argument(
        "--tax-year", type=int, help="Tax year (default: from profile or today)"
    )
    t2125_parser.add_argument(
        "--home-office-percent",
        type=fraction_arg,
        help="Business share of home costs as a fraction, e.g. 0.15",
    )
    _add_output_argument(t2125_parser)

    # Summary command
    summary_parser = subparsers.add_parser(
        "summary",
        help="Show dashboard totals",
        description="Income, expenses, mileage and per-category totals",
    )
    summary_parser.add_argument("ledger", type=str, help="Path to the ledger JSON file")
    _add_period_arguments(summary_parser)
    _add_output_argument(summary_parser)

    # Estimate command
    estimate_parser = subparsers.add_parser(
        "estimate",
        help="Estimate deductions and tax savings",
        description="Break deductions into components and estimate tax savings",
    )
    estimate_parser.add_argument(
        "ledger", type=str, help="Path to the ledger JSON file"
    )
    estimate_parser.add_argument(
        "--home-office-percent",
        type=fraction_arg,
        help="Business share of home costs as a fraction, e.g. 0.15",
    )
    _add_period_arguments(estimate_parser)
    _add_output_argument(estimate_parser)

    # CCA command
    cca_parser = subparsers.add_parser(
        "cca",
        help="Compute one year of capital cost allowance",
        description="Declining-balance CCA with the optional half-year rule",
    )
    cca_parser.add_argument(
        "--cost", type=decimal_arg, required=True, help="Capital cost before tax"
    )
    cca_parser.add_argument(
        "--opening-ucc",
        type=decimal_arg,
        required=True,
        help="Undepreciated capital cost at the start of the year",
    )
    cca_parser.add_argument(
        "--rate",
        type=decimal_arg,
        help="Declining-balance rate as a fraction (default: class rate)",
    )
    cca_parser.add_argument(
        "--class",
        dest="asset_class",
        choices=["10", "10.1", "54"],
        default="10",
        help="CCA class (default: 10)",
    )
    cca_parser.add_argument(
        "--no-half-year",
        action="store_true",
        help="Claim the full cost instead of half in the year of purchase",
    )
    _add_output_argument(cca_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging("DEBUG" if args.verbose else "WARNING")

    try:
        sys.exit(DeductlyCLI().run(args))
    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user", file=sys.stderr)  # noqa: T201
        sys.exit(EXIT_CANCELLED)


if __name__ == "__main__":
    main()
