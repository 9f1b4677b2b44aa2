"""Profile CLI commands for Rate Calc.

Manages user profile data (profile.yaml) - input defaults, health plan costs.
"""

from pathlib import Path

import click
import yaml

from ratecalc.sdk import (
    default_profile,
    get_profile_path,
    get_profile_value,
    load_settings,
    save_profile,
    set_profile_value,
    set_setting,
    validate_profile,
)


def _validate_profile_file(path):
    """Validate a profile file at the given path.

    Args:
        path: Path to profile.yaml file

    Returns:
        Tuple of (profile_dict, validation_result) if valid

    Raises:
        click.ClickException: If file is invalid YAML or fails validation
    """
    path = Path(path)

    if not path.exists():
        raise click.ClickException(f"Profile file not found: {path}")

    if path.suffix not in (".yaml", ".yml"):
        raise click.ClickException(f"Profile must be a YAML file: {path}")

    try:
        with open(path, "r") as f:
            profile_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise click.ClickException(f"Invalid YAML in {path}: {e}")

    if not isinstance(profile_data, dict):
        raise click.ClickException(f"Profile must be a YAML dictionary, got {type(profile_data).__name__}")

    validation = validate_profile(profile=profile_data)
    validation.location_path = path
    if validation.errors:
        _display_validation(validation, raise_on_errors=True)

    return profile_data, validation


def _display_validation(validation, raise_on_errors=False):
    """Display validation results consistently across commands.

    Args:
        validation: ProfileValidationResult from validate_profile()
        raise_on_errors: If True, raise ClickException for validation errors

    Returns:
        True if valid (no errors), False if has errors
    """
    if validation.errors:
        click.echo()
        click.echo("Validation Errors (profile is invalid):")
        for error in validation.errors:
            click.echo(f"  ! {error}")
        click.echo()
        click.echo(f"Profile path: {validation.location_path}")

        if raise_on_errors:
            raise click.ClickException("Profile has validation errors. Fix them before continuing.")

    if validation.warnings:
        click.echo()
        click.echo("Warnings:")
        for warning in validation.warnings:
            click.echo(f"  - {warning}")

    return validation.is_valid


# =============================================================================
# PROFILE commands - user profile data (profile.yaml)
# =============================================================================

@click.group()
def profile():
    """Manage your profile configuration (profile.yaml).

    Profile holds your scenario defaults:
    - defaults: starting values for every calc input
    - health_plans: your actual employer cost per plan
    """
    pass


@profile.command("show")
def profile_show():
    """Show the active profile, its location, and validation status."""
    profile_path = get_profile_path(require_exists=False)

    if load_settings().get("profile"):
        location_label = "custom"
    elif profile_path.exists():
        location_label = "central (default)"
    else:
        location_label = "not created"

    click.echo(f"Profile: {profile_path}")
    click.echo(f"Location: {location_label}")

    if not profile_path.exists():
        click.echo()
        click.echo("Profile does not exist yet. Create with:")
        click.echo("  rate-calc profile init")
        return

    validation = validate_profile()
    if _display_validation(validation):
        click.echo()
        click.echo("Profile is valid.")

    click.echo()
    click.echo("---")
    click.echo(profile_path.read_text().rstrip())


@profile.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing profile")
def profile_init(force):
    """Create a profile filled with the built-in calculator defaults."""
    profile_path = get_profile_path(require_exists=False)
    if profile_path.exists() and not force:
        raise click.ClickException(
            f"Profile already exists: {profile_path}\n"
            f"Use --force to overwrite."
        )

    saved = save_profile(default_profile(), profile_path)
    click.echo(f"Created profile: {saved}")


@profile.command("get")
@click.argument("key")
def profile_get(key):
    """Get a profile configuration value.

    KEY is a dot-notation path like 'defaults.annual_salary'
    """
    value = get_profile_value(key)
    if value is None:
        raise click.ClickException(f"Key '{key}' not found in profile")

    if isinstance(value, (dict, list)):
        click.echo(yaml.dump(value, default_flow_style=False, sort_keys=False).rstrip())
    else:
        click.echo(value)


@profile.command("set")
@click.argument("key")
@click.argument("value")
def profile_set(key, value):
    """Set a profile configuration value.

    KEY is a dot-notation path like 'defaults.annual_salary'
    VALUE is the value to set (string or number)

    Examples:
        rate-calc profile set defaults.annual_salary 125000
        rate-calc profile set defaults.health_insurance_plan family
        rate-calc profile set health_plans.single 7500
    """
    section = key.split(".")[0]
    if section not in ("defaults", "health_plans") or "." not in key:
        raise click.ClickException(
            f"Unknown profile key '{key}'. Keys start with 'defaults.' or 'health_plans.'"
        )

    parsed_value = _parse_number(value)

    profile_file = set_profile_value(key, parsed_value)
    click.echo(f"Set {key} = {parsed_value}")
    click.echo(f"Saved to: {profile_file}")

    _display_validation(validate_profile())


@profile.command("use")
@click.argument("profile_path", type=click.Path(exists=True))
def profile_use(profile_path):
    """Set the active profile to an external file.

    PROFILE_PATH is the path to a profile.yaml file, typically in a
    config repo you manage separately. The profile is validated before
    being set as active.

    Examples:
        rate-calc profile use ~/repos/my-config/rate-calc/profile.yaml
    """
    path = Path(profile_path).expanduser().resolve()

    # Raises on errors
    _validate_profile_file(path)

    settings_file = set_setting("profile", str(path))
    click.echo(f"Active profile set to: {path}")
    click.echo(f"Saved to: {settings_file}")


@profile.command("validate")
def profile_validate():
    """Validate the active profile; exits non-zero on errors."""
    validation = validate_profile()
    if not validation.exists:
        click.echo(f"No profile at {validation.location_path} (built-in defaults are used).")
        return

    _display_validation(validation, raise_on_errors=True)
    click.echo("Profile is valid.")


def _parse_number(value: str):
    """int or float when VALUE reads as one, otherwise the string unchanged."""
    for convert in (int, float):
        try:
            return convert(value)
        except ValueError:
            continue
    return value
