"""Settings and exchange-rate commands."""

import click
from lexledger.cli.error_handling import reporting_errors
from lexledger.domain.settings import EXCHANGE_RATE_KEY, SettingsService


@click.group()
def settings_group():
    """Read and write settings."""
    pass


@settings_group.command("get")
@click.argument("key")
@click.pass_context
def get_setting(ctx, key: str):
    """Show a setting."""
    with reporting_errors(ctx):
        setting = SettingsService(ctx.obj["db"]).get_setting(key)
    if setting is None:
        click.echo(f"Error: Setting '{key}' not set", err=True)
        ctx.exit(1)
    click.echo(f"{setting.key} = {setting.value}")


@settings_group.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def set_setting(ctx, key: str, value: str):
    """Create or update a setting."""
    with reporting_errors(ctx):
        SettingsService(ctx.obj["db"]).set_setting(key, value)
        click.echo(f"{key} = {value}")


@click.group()
def rate_group():
    """Manage exchange rates."""
    pass


@rate_group.command("set")
@click.argument("rate")
@click.option("--pair", "pair_key", default=EXCHANGE_RATE_KEY, show_default=True, help="Settings key of the pair")
@click.pass_context
def set_rate(ctx, rate: str, pair_key: str):
    """Store an exchange rate (must be greater than zero).

    Examples:
        lexledger rate set 50.75
        lexledger rate set 0.92 --pair EX_RATE_USD_EUR
    """
    with reporting_errors(ctx):
        stored = SettingsService(ctx.obj["db"]).set_exchange_rate(pair_key, rate)
        click.echo(f"{pair_key} = {stored}")


@rate_group.command("get")
@click.option("--pair", "pair_key", default=EXCHANGE_RATE_KEY, show_default=True, help="Settings key of the pair")
@click.pass_context
def get_rate(ctx, pair_key: str):
    """Show a stored exchange rate."""
    with reporting_errors(ctx):
        rate = SettingsService(ctx.obj["db"]).get_exchange_rate(pair_key)
    if rate is None:
        click.echo(f"Error: No exchange rate stored under {pair_key}", err=True)
        ctx.exit(1)
    click.echo(f"{pair_key} = {rate}")


@rate_group.command("convert")
@click.argument("amount")
@click.argument("from_currency")
@click.argument("to_currency")
@click.pass_context
def convert(ctx, amount: str, from_currency: str, to_currency: str):
    """Convert an amount using stored rates.

    Examples:
        lexledger rate convert 1000 EGP USD
    """
    with reporting_errors(ctx):
        result = SettingsService(ctx.obj["db"]).convert(amount, from_currency, to_currency)
        click.echo(f"{amount} {from_currency.upper()} = {result} {to_currency.upper()}")


def register_commands(cli):
    """Register settings commands with main CLI."""
    cli.add_command(settings_group, name="settings")
    cli.add_command(rate_group, name="rate")
