"""
FAGF CLI — evaluate agent transactions against financial mandates.

Commands:
    fagf mandates     Show the active mandate configuration
    fagf evaluate     Evaluate a single proposed transaction
    fagf scenarios    Run the storyline scenarios
"""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .envelope import EnvelopeContext, GovernanceEnvelope, Transaction
from .errors import GovernanceError
from .mandate import FinancialMandates
from .profiles import MANDATES_PATH_ENV, resolve_mandates, save_mandates
from .scenarios import SCENARIOS, get_scenario
from .validator import GovernanceValidator, Verdict


EXIT_CODES = {
    Verdict.APPROVED: 0,
    Verdict.HITL_REQUIRED: 2,
    Verdict.BLOCKED: 3,
}

_config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    envvar=MANDATES_PATH_ENV,
    help=f"JSON mandate profile (default: ${MANDATES_PATH_ENV} or the MAS profile)",
)


def _load(config_path: Optional[Path]) -> FinancialMandates:
    try:
        return resolve_mandates(config_path)
    except GovernanceError as exc:
        raise click.ClickException(str(exc)) from exc


def _echo_json(payload) -> None:
    click.echo(json.dumps(payload, indent=2))


@click.group()
@click.version_option(version=__version__)
def main():
    """FAGF — deterministic governance for autonomous agent payments."""
    pass


@main.command()
@_config_option
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write the configuration to this file instead of stdout")
def mandates(config_path: Optional[Path], output: Optional[Path]):
    """Show the active mandate configuration."""
    config = _load(config_path)
    if output is not None:
        save_mandates(config, output)
        click.echo(f"Mandates written to {output}")
        return
    _echo_json(config.to_dict())


@main.command()
@click.option("--amount", type=float, required=True, help="Transaction amount")
@click.option("--merchant", required=True, help="Merchant name")
@click.option("--category", required=True, help="Merchant category")
@click.option("--method", "payment_method", required=True, help="Payment method")
@click.option("--destination", default=None, help="Routing token (default: merchant)")
@click.option("--reasoning", default="", help="Agent rationale")
@click.option("--new-merchant", is_flag=True, default=False,
              help="Merchant has no accepted history")
@click.option("--enforce-daily-limit", is_flag=True, default=False,
              help="Also enforce the daily aggregate limit mandate")
@_config_option
def evaluate(
    amount: float,
    merchant: str,
    category: str,
    payment_method: str,
    destination: Optional[str],
    reasoning: str,
    new_merchant: bool,
    enforce_daily_limit: bool,
    config_path: Optional[Path],
):
    """Evaluate one proposed transaction. Exit code 0 approved, 2 HITL, 3 blocked."""
    if amount < 0:
        raise click.BadParameter("amount must be non-negative", param_hint="--amount")
    config = _load(config_path)
    envelope = GovernanceEnvelope(
        transaction=Transaction(
            amount=amount,
            destination=destination or merchant,
            merchant_name=merchant,
            category=category,
            payment_method=payment_method,
            timestamp=time.time(),
        ),
        reasoning=reasoning,
        context=EnvelopeContext(is_new_merchant=new_merchant),
    )
    result = GovernanceValidator.validate(
        envelope, config, [], enforce_daily_limit=enforce_daily_limit
    )
    _echo_json(result.to_dict())
    click.get_current_context().exit(EXIT_CODES[result.verdict])


@main.command()
@click.argument("key", required=False)
@_config_option
def scenarios(key: Optional[str], config_path: Optional[Path]):
    """Run the storyline scenarios (or only KEY)."""
    config = _load(config_path)
    selected = SCENARIOS
    if key is not None:
        scenario = get_scenario(key)
        if scenario is None:
            known = ", ".join(s.key for s in SCENARIOS)
            raise click.ClickException(f"Unknown scenario '{key}' (known: {known})")
        selected = [scenario]

    for scenario in selected:
        envelope = scenario.envelope()
        result = GovernanceValidator.validate(envelope, config, [])
        tx = envelope.transaction
        click.echo(f"\n{scenario.title}")
        click.echo(f"  {tx.amount_display} → {tx.merchant_name} ({tx.category}, {tx.payment_method})")
        click.echo(f"  Verdict:  {result.verdict.value.upper()}")
        if result.reason:
            click.echo(f"  Reason:   {result.reason}")
            click.echo(f"  Risk:     {result.mitigation_risk}")
            click.echo(f"  Severity: {result.severity.value}")
            click.echo(f"  Mandate:  {', '.join(result.triggered_mandates)}")
