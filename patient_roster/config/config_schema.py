"""Configuration schema using Pydantic for type-safe validation."""

import uuid
from pathlib import Path
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_CONFIG_PATH = Path(__file__).parent / "default_config.yaml"

# Fixed namespace for patient UUIDs. Changing it changes every UUID.
DEFAULT_UUID_NAMESPACE = uuid.UUID("6f2c1c7e-3d4b-5a8e-9b1f-0c2d4e6a8b10")


class OverrideRule(BaseModel):
    """A site identifier known to be shared by genuinely distinct people."""

    local_id: str = Field(description="Identifier to force-split before merging")

    drop_missing_birth_year: bool = Field(
        default=True,
        description="Discard matching rows without a birth year as noise",
    )

    @field_validator("local_id")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Ensure the identifier is not blank."""
        v = v.strip()
        if not v:
            raise ValueError("Override identifier must not be blank")
        return v


class UuidConfig(BaseModel):
    """Configuration for deterministic patient UUID derivation."""

    namespace: uuid.UUID = Field(
        default=DEFAULT_UUID_NAMESPACE,
        description="Namespace UUID for uuid5 derivation from canonical IDs",
    )


class BirthdateConfig(BaseModel):
    """Rules for repairing implausible birth dates."""

    min_year: int = Field(default=1900, description="Earliest plausible birth year")

    export_year: int = Field(
        default=2019, description="Year the site extracts were exported"
    )

    export_month: int = Field(
        default=7,
        ge=1,
        le=12,
        description="Month the site extracts were exported; later dates are invalid",
    )

    @model_validator(mode="after")
    def validate_year_bounds(self):
        """Ensure the export year is not before the earliest birth year."""
        if self.export_year < self.min_year:
            raise ValueError(
                f"export_year ({self.export_year}) < min_year ({self.min_year})"
            )
        return self


class PathConfig(BaseModel):
    """Configuration for input/output paths."""

    input_dir: Optional[Path] = Field(
        default=None, description="Directory with one subdirectory per clinic site"
    )

    cache_path: Path = Field(
        default=Path("data/tmp/prepped-patients.parquet"),
        description="Where the cleaned roster is cached (.parquet or .csv)",
    )

    output_dir: Path = Field(
        default=Path("data/output"), description="Directory for generated tables"
    )


class ResolutionConfig(BaseModel):
    """Master configuration for roster resolution."""

    manual_overrides: List[OverrideRule] = Field(default_factory=list)

    uuid: UuidConfig = Field(default_factory=UuidConfig)

    birthdate: BirthdateConfig = Field(default_factory=BirthdateConfig)

    paths: PathConfig = Field(default_factory=PathConfig)

    timezone: str = Field(
        default="America/Mexico_City",
        description="Timezone used when rendering registration and consult dates",
    )

    use_cache: bool = Field(
        default=True, description="Reuse the cached roster when it exists"
    )

    @field_validator("manual_overrides")
    @classmethod
    def validate_unique_overrides(cls, v: List[OverrideRule]) -> List[OverrideRule]:
        """Ensure each identifier is listed once."""
        seen = set()
        for rule in v:
            if rule.local_id in seen:
                raise ValueError(f"Duplicate manual override for {rule.local_id}")
            seen.add(rule.local_id)
        return v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Ensure the timezone is known to the tz database."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v


def load_config(config_path: Optional[Path] = None) -> ResolutionConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to YAML configuration file (packaged default if None)

    Returns:
        Validated ResolutionConfig
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    with open(path, "r") as f:
        config_dict = yaml.safe_load(f) or {}

    return ResolutionConfig(**config_dict)
