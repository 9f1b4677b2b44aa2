"""Configuration management for Rate Calc.

Configuration is split into two files:

1. settings.json - Machine-specific, ephemeral settings
   - profile: path to profile.yaml (optional, if not colocated)
   - default_output_format: 'text' or 'json' for the calc command

2. profile.yaml - User's scenario configuration
   - defaults: starting values for calculator inputs
   - health_plans: annual employer cost overrides per plan id

Config directory resolution:
1. RATE_CALC_CONFIG_PATH environment variable (if set)
2. ~/.config/rate-calc/ (XDG_CONFIG_HOME fallback)

Profile resolution:
1. settings.json "profile" key (if set via CLI)
2. profile.yaml in same config directory
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .health_plans import get_health_plan, UnknownHealthPlanError
from .inputs import (
    DEFAULT_INPUT_VALUES,
    INPUT_KEYS,
    build_inputs,
    canonical_input_key,
    merge_input_values,
)
from .schemas import MANUAL_ENTRY_PLAN_ID, RateInputs


APP_NAME = "rate-calc"
SETTINGS_FILENAME = "settings.json"
PROFILE_FILENAME = "profile.yaml"
OUTPUT_FORMATS = ("text", "json")


class ProfileNotFoundError(Exception):
    """Raised when no profile is found."""
    pass


class ProfileValidationError(Exception):
    """Raised when profile.yaml sections fail validation."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. RATE_CALC_CONFIG_PATH environment variable
    2. ~/.config/rate-calc/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    # 1. Check environment variable
    env_path = os.environ.get("RATE_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    # 2. Fall back to XDG config path
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    settings = load_settings()
    return settings.get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Returns:
        Path to the saved settings file
    """
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_default_output_format() -> str:
    """Output format for calc when --format is not given."""
    value = get_setting("default_output_format", "text")
    return value if value in OUTPUT_FORMATS else "text"


def get_profile_path(require_exists: bool = False) -> Path:
    """Get the path to the profile.yaml file.

    Resolution order:
    1. settings.json "profile" key (if set)
    2. profile.yaml in config directory

    Args:
        require_exists: If True, raises ProfileNotFoundError if not found

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
    """
    config_dir = get_config_dir()

    # 1. Check settings.json for custom profile path
    custom_profile = get_setting("profile")
    if custom_profile:
        profile_path = Path(custom_profile)
        if require_exists and not profile_path.exists():
            raise ProfileNotFoundError(
                f"Profile not found at configured path: {profile_path}\n\n"
                f"Update with: rate-calc profile use /path/to/profile.yaml"
            )
        return profile_path

    # 2. Check for profile.yaml in config directory
    profile_path = config_dir / PROFILE_FILENAME
    if require_exists and not profile_path.exists():
        raise ProfileNotFoundError(
            f"No profile found. Checked:\n"
            f"  1. settings.json 'profile' key (not set)\n"
            f"  2. {profile_path} (not found)\n\n"
            f"Create a profile with: rate-calc profile init"
        )

    return profile_path


def load_profile(require_exists: bool = True) -> dict:
    """Load user profile from profile.yaml.

    Returns:
        Profile dictionary (empty dict if not required and not found)

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
        ProfileValidationError: If the file is not a YAML mapping
    """
    profile_path = get_profile_path(require_exists=require_exists)

    if not profile_path.exists():
        return {}

    with open(profile_path, "r") as f:
        try:
            profile = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ProfileValidationError(f"Invalid YAML in {profile_path}: {e}")

    if not isinstance(profile, dict):
        raise ProfileValidationError(
            f"Profile must be a YAML dictionary, got {type(profile).__name__}"
        )
    return profile


def save_profile(profile: dict, path: Optional[Path] = None) -> Path:
    """Save user profile to profile.yaml.

    Args:
        profile: Profile dictionary to save
        path: Optional custom path (uses default if not specified)

    Returns:
        Path to the saved profile file
    """
    if path is None:
        path = get_profile_path(require_exists=False)

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.dump(profile, f, default_flow_style=False, sort_keys=False)

    return path


def get_profile_value(key: str, default: Any = None) -> Any:
    """Get a profile value by dot-notation key (e.g., "defaults.annual_salary")."""
    profile = load_profile(require_exists=False)

    value = profile
    for part in key.split("."):
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return default

    return value


def set_profile_value(key: str, value: Any) -> Path:
    """Set a profile value by dot-notation key.

    Returns:
        Path to the saved profile file
    """
    profile = load_profile(require_exists=False)

    parts = key.split(".")
    current = profile

    # Navigate/create nested structure
    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]

    current[parts[-1]] = value

    return save_profile(profile)


def default_profile() -> dict:
    """Starter profile written by 'rate-calc profile init'."""
    return {
        "defaults": dict(DEFAULT_INPUT_VALUES),
        "health_plans": {},
    }


# =============================================================================
# Profile sections
# =============================================================================


class HealthPlanOverrides(BaseModel):
    """health_plans section: {plan_id: annual employer cost}."""

    model_config = ConfigDict(extra="forbid")

    costs: Dict[str, float] = Field(default_factory=dict)

    @field_validator("costs", mode="before")
    @classmethod
    def normalize_plan_ids(cls, v: Any) -> Any:
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError(f"health_plans must be a mapping of plan id to cost, got {type(v).__name__}")
        return {str(k).strip().lower(): cost for k, cost in v.items()}

    @field_validator("costs")
    @classmethod
    def check_costs(cls, v: Dict[str, float]) -> Dict[str, float]:
        for plan_id, cost in v.items():
            if plan_id == MANUAL_ENTRY_PLAN_ID:
                raise ValueError(f"'{MANUAL_ENTRY_PLAN_ID}' is manual entry and cannot have a fixed cost")
            if cost < 0:
                raise ValueError(f"Health plan '{plan_id}' cost must be non-negative, got {cost}")
        return v


def load_health_plan_overrides(profile: Optional[dict] = None) -> Dict[str, float]:
    """Read health plan cost overrides from the profile.

    Args:
        profile: Profile dict (loads the active profile if None)

    Raises:
        ProfileValidationError: If the health_plans section is invalid
    """
    if profile is None:
        profile = load_profile(require_exists=False)
    try:
        overrides = HealthPlanOverrides(costs=profile.get("health_plans"))
    except ValidationError as e:
        raise ProfileValidationError(f"Invalid health_plans in profile: {e}")
    return overrides.costs


def load_default_values(profile: Optional[dict] = None) -> Dict[str, Any]:
    """Built-in input defaults with the profile's defaults section merged over.

    Raises:
        ProfileValidationError: If the defaults section is not a mapping
    """
    if profile is None:
        profile = load_profile(require_exists=False)
    defaults = profile.get("defaults") or {}
    if not isinstance(defaults, dict):
        raise ProfileValidationError(
            f"Profile 'defaults' must be a mapping, got {type(defaults).__name__}"
        )
    return merge_input_values(DEFAULT_INPUT_VALUES, defaults)


def load_default_inputs(profile: Optional[dict] = None) -> RateInputs:
    """Default Input Set: built-in defaults overlaid with profile defaults."""
    return build_inputs(load_default_values(profile))


# =============================================================================
# Profile validation
# =============================================================================


@dataclass
class ProfileValidationResult:
    """Result of profile validation."""
    location_path: Optional[Path] = None
    exists: bool = False
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def require_valid(self) -> None:
        """Raise ProfileValidationError listing every error."""
        if self.errors:
            details = "\n".join(f"  - {e}" for e in self.errors)
            raise ProfileValidationError(f"Profile has validation errors:\n{details}")


def validate_profile(profile: Optional[dict] = None) -> ProfileValidationResult:
    """Validate profile contents.

    Errors make the profile unusable (bad health_plans, unknown plan in
    defaults). Warnings flag values that will silently become 0 or keys
    that are ignored.

    Args:
        profile: Profile dict to validate (loads the active profile if None)
    """
    result = ProfileValidationResult()
    if profile is None:
        result.location_path = get_profile_path(require_exists=False)
        result.exists = result.location_path.exists()
        try:
            profile = load_profile(require_exists=False)
        except ProfileValidationError as e:
            result.errors.append(str(e))
            return result
    else:
        result.exists = True

    for key in profile:
        if key not in ("defaults", "health_plans"):
            result.warnings.append(f"Unknown profile section '{key}' is ignored")

    overrides = {}
    try:
        overrides = load_health_plan_overrides(profile)
    except ProfileValidationError as e:
        result.errors.append(str(e))

    defaults = profile.get("defaults") or {}
    if not isinstance(defaults, dict):
        result.errors.append(f"'defaults' must be a mapping, got {type(defaults).__name__}")
        return result

    for raw_key, value in defaults.items():
        key = canonical_input_key(raw_key)
        if key not in INPUT_KEYS:
            result.warnings.append(f"Unknown input 'defaults.{raw_key}' is ignored")
            continue
        if value is None:
            continue
        if key == "health_insurance_plan":
            try:
                get_health_plan(value, overrides)
            except UnknownHealthPlanError:
                result.errors.append(f"Unknown health insurance plan 'defaults.{key}': {value}")
            continue
        if not _is_numeric(value):
            result.warnings.append(f"'defaults.{key}' is not a number ({value!r}); it will be treated as 0")

    return result


def _is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    try:
        float(str(value).strip())
    except ValueError:
        return False
    return True
