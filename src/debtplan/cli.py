"""Command line interface for running payoff plans."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click

from .config import BaseConfig
from .errors import DebtPlanError
from .logging_config import get_logger, setup_logging
from .models.debt import Strategy
from .models.plan import PaymentPlan
from .services.comparison import compare_strategies, compare_to_minimum_only
from .services.debts import SimulateRequest, simulate
from .services.export_csv import export_plan_csv, export_schedule_csv
from .services.import_csv import load_debts_file
from .services.reports import payoff_chart_png, payoff_order

logger = get_logger(__name__)

STRATEGY_CHOICES = [s.value for s in Strategy]


def _build_request(
    config: BaseConfig,
    file: Path,
    *,
    strategy: str | None,
    extra: str | None,
    one_time: str | None,
    start_date: str | None,
    max_months: int | None,
) -> SimulateRequest:
    debts, policy = load_debts_file(file)
    defaults = config.engine_defaults()
    if max_months is not None:
        defaults["max_months"] = max_months

    def pick(cli_value: Any, key: str, default: Any) -> Any:
        return cli_value if cli_value is not None else policy.get(key, default)

    return SimulateRequest(
        debts=tuple(debts),
        strategy=pick(strategy, "strategy", Strategy.SNOWBALL),
        extra_monthly=pick(extra, "extra_monthly", 0),
        one_time_extra=pick(one_time, "one_time_extra", 0),
        start_date=pick(start_date, "start_date", None),
        **defaults,
    )


def _echo_plan(plan: PaymentPlan) -> None:
    totals = plan.totals
    click.echo(f"Strategy: {plan.strategy.value}")
    if totals.incomplete:
        click.echo(f"Not debt free within {plan.max_months} months (capped)")
    else:
        click.echo(f"Debt free in {totals.months_to_debt_free} months ({totals.debt_free_date.isoformat()})")
    click.echo(f"Total interest: ${totals.total_interest}")
    click.echo(f"Total paid: ${totals.total_outlay}")
    for event in payoff_order(plan):
        click.echo(f"  month {event.month:>3}  {event.date.isoformat()}  {event.debt_name}")
    for debt_id in plan.non_amortizing:
        click.echo(f"  warning: {plan.debt(debt_id).label} minimum does not cover interest")


def _common_options(func):
    options = [
        click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path)),
        click.option("--strategy", type=click.Choice(STRATEGY_CHOICES, case_sensitive=False), default=None),
        click.option("--extra", default=None, help="Extra amount paid every month"),
        click.option("--one-time", "one_time", default=None, help="Lump sum applied in month 1"),
        click.option("--start-date", default=None, help="ISO date the plan starts from"),
        click.option("--max-months", type=int, default=None, help="Simulation cap in months"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Debt payoff planner."""

    config = BaseConfig()
    setup_logging(config)
    ctx.obj = config


@cli.command("simulate")
@_common_options
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.option("--schedule-csv", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.option("--chart", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the full plan as JSON")
@click.pass_obj
def simulate_command(
    config: BaseConfig,
    file: Path,
    strategy: str | None,
    extra: str | None,
    one_time: str | None,
    start_date: str | None,
    max_months: int | None,
    csv_path: Path | None,
    schedule_csv: Path | None,
    chart: Path | None,
    as_json: bool,
) -> None:
    """Simulate a payoff plan for the debts in FILE (.csv or .json)."""

    try:
        request = _build_request(
            config, file, strategy=strategy, extra=extra, one_time=one_time,
            start_date=start_date, max_months=max_months,
        )
        plan = simulate(request)
    except DebtPlanError as exc:
        raise click.ClickException(str(exc)) from exc

    if as_json:
        click.echo(json.dumps(plan.to_dict(), indent=2))
    else:
        _echo_plan(plan)

    if csv_path:
        click.echo(f"Plan written: {export_plan_csv(plan=plan, output_path=csv_path)}")
    if schedule_csv:
        click.echo(f"Schedule written: {export_schedule_csv(plan=plan, output_path=schedule_csv)}")
    if chart:
        click.echo(f"Chart written: {payoff_chart_png(plan, chart)}")


@cli.command("compare")
@_common_options
@click.pass_obj
def compare_command(
    config: BaseConfig,
    file: Path,
    strategy: str | None,
    extra: str | None,
    one_time: str | None,
    start_date: str | None,
    max_months: int | None,
) -> None:
    """Compare snowball with avalanche, and both with minimum-only payments."""

    try:
        request = _build_request(
            config, file, strategy=strategy, extra=extra, one_time=one_time,
            start_date=start_date, max_months=max_months,
        )
        result = compare_strategies(request, Strategy.SNOWBALL, Strategy.AVALANCHE)
        baseline = compare_to_minimum_only(request)
    except DebtPlanError as exc:
        raise click.ClickException(str(exc)) from exc

    for plan in (result.first, result.second):
        months = plan.totals.months_to_debt_free
        suffix = "+" if plan.totals.incomplete else ""
        click.echo(f"{plan.strategy.value:<16}{months}{suffix} months  ${plan.totals.total_interest} interest")
    click.echo(f"Faster: {result.faster}")
    click.echo(f"Lower interest: {result.lower_interest}")
    click.echo(
        f"vs minimum only: {baseline.months_saved} months and ${baseline.interest_saved} interest saved"
    )


@cli.command("export")
@_common_options
@click.option(
    "--out",
    "out_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("debtplan-export"),
    show_default=True,
)
@click.pass_obj
def export_command(
    config: BaseConfig,
    file: Path,
    strategy: str | None,
    extra: str | None,
    one_time: str | None,
    start_date: str | None,
    max_months: int | None,
    out_dir: Path,
) -> None:
    """Write plan CSV, schedule CSV and payoff chart PNG into a directory."""

    try:
        request = _build_request(
            config, file, strategy=strategy, extra=extra, one_time=one_time,
            start_date=start_date, max_months=max_months,
        )
        plan = simulate(request)
    except DebtPlanError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo("Starting export...")
    written = [
        export_plan_csv(plan=plan, output_path=out_dir / "plan.csv"),
        export_schedule_csv(plan=plan, output_path=out_dir / "schedule.csv"),
        payoff_chart_png(plan, out_dir / "payoff.png"),
    ]
    logger.info("Export complete", extra={"out_dir": str(out_dir), "files": len(written)})
    for path in written:
        click.echo(f"Export written: {path}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
