"""Settings CLI commands for Rate Calc.

Manages settings.json - profile path, output preferences.
"""

import click

from ratecalc.sdk import (
    OUTPUT_FORMATS,
    get_default_output_format,
    get_profile_path,
    get_settings_path,
    load_settings,
    save_settings,
    set_setting,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - default_output_format: 'text' or 'json' for calc
    - profile: path to profile.yaml (set via 'profile use')
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective values:")
    click.echo(f"  profile: {get_profile_path(require_exists=False)}")
    click.echo(f"  default_output_format: {get_default_output_format()}")


@settings.command("format")
@click.argument("output_format", required=False, type=click.Choice(OUTPUT_FORMATS))
@click.option("--clear", is_flag=True, help="Clear the setting, revert to text")
def settings_format(output_format, clear):
    """Set or clear the default output format for calc.

    Examples:
        rate-calc settings format json
        rate-calc settings format --clear
    """
    if clear:
        current = load_settings()
        if "default_output_format" in current:
            del current["default_output_format"]
            save_settings(current)
            click.echo("Cleared default_output_format setting.")
        else:
            click.echo("default_output_format was not set.")
        return

    if not output_format:
        click.echo(f"Default output format: {get_default_output_format()}")
        return

    set_setting("default_output_format", output_format)
    click.echo(f"Set default_output_format: {output_format}")
    click.echo(f"Saved to: {get_settings_path()}")
