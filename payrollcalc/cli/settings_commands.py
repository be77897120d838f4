"""Settings CLI commands for Payroll Calc.

Manages settings.json - remote calculation service, batch threshold, tax tables.
"""

import click

from payrollcalc.sdk import (
    DEFAULT_SETTINGS,
    SettingsError,
    get_effective_settings,
    get_settings_path,
    load_settings,
    set_setting,
    unset_setting,
)

SECRET_SETTINGS = {"remote_api_token"}


def _display(key, value):
    if value is None:
        return "(not set)"
    if key in SECRET_SETTINGS:
        return "********"
    return value


@click.group()
def settings():
    """Manage settings (settings.json).

    \b
    Available settings:
    - remote_base_url: batch calculation service URL (unset = always local)
    - remote_api_token: bearer token for the calculation service
    - remote_timeout_seconds: remote call timeout (default 30)
    - batch_threshold: employees needed before using the service (default 50)
    - availability_check_interval_seconds: retry delay after a failure (default 60)
    - tax_tables_dir: directory with custom tax table YAML files
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their effective values."""
    settings_path = get_settings_path()
    try:
        current = load_settings()
        effective = get_effective_settings()
    except SettingsError as e:
        raise click.ClickException(str(e))

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
        click.echo()

    click.echo("Effective settings:")
    for key, value in effective.items():
        source = "" if key in current else " (default)"
        click.echo(f"  {key}: {_display(key, value)}{source}")


@settings.command("set")
@click.argument("key", type=click.Choice(sorted(DEFAULT_SETTINGS)))
@click.argument("value")
def settings_set(key, value):
    """Set KEY to VALUE in settings.json.

    \b
    Examples:
        payroll-calc settings set remote_base_url https://payroll.example.com
        payroll-calc settings set batch_threshold 100
    """
    try:
        path = set_setting(key, value)
    except SettingsError as e:
        raise click.ClickException(str(e))
    click.echo(f"Set {key}: {_display(key, value)}")
    click.echo(f"Saved to: {path}")


@settings.command("unset")
@click.argument("key", type=click.Choice(sorted(DEFAULT_SETTINGS)))
def settings_unset(key):
    """Remove KEY from settings.json, reverting it to its default."""
    try:
        if key not in load_settings():
            click.echo(f"{key} was not set.")
            return
        unset_setting(key)
    except SettingsError as e:
        raise click.ClickException(str(e))
    click.echo(f"Cleared {key} setting.")
