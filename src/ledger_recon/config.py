"""Configuration loader and validation for reconciliation settings."""

from decimal import Decimal
from pathlib import Path
from typing import Any, Optional
import logging

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

REFERENCE_TIER = "reference"
GROUPED_EXACT_TIER = "grouped_exact"
KNOWN_TIERS = (REFERENCE_TIER, GROUPED_EXACT_TIER)


class SystemInputConfig(BaseModel):
    """Parsing settings for the system transactions CSV."""

    encoding: str = "utf-8"
    delimiter: str = ","
    # strptime pattern for transactionTime; unset means RFC 3339
    time_format: Optional[str] = None
    column_mappings: dict[str, str] = Field(
        default_factory=lambda: {
            "trx_id": "trxID",
            "amount": "amount",
            "type": "type",
            "transaction_time": "transactionTime",
        }
    )


class BankInputConfig(BaseModel):
    """Parsing settings for bank statement CSVs."""

    encoding: str = "utf-8"
    delimiter: str = ","
    date_format: str = "%Y-%m-%d"
    column_mappings: dict[str, str] = Field(
        default_factory=lambda: {
            "unique_identifier": "unique_identifier",
            "amount": "amount",
            "date": "date",
            "description": "description",
        }
    )


class InputConfig(BaseModel):
    """Configuration for input file parsing."""

    system: SystemInputConfig = Field(default_factory=SystemInputConfig)
    bank: BankInputConfig = Field(default_factory=BankInputConfig)


class MatchingTier(BaseModel):
    """A matching pass with priority and on/off switch."""

    name: str
    description: str = ""
    priority: int = 99
    enabled: bool = True

    @field_validator("name")
    @classmethod
    def _known_tier(cls, value: str) -> str:
        if value not in KNOWN_TIERS:
            raise ValueError(f"unknown matching tier '{value}', expected one of {KNOWN_TIERS}")
        return value


def _default_tiers() -> list[MatchingTier]:
    return [
        MatchingTier(
            name=REFERENCE_TIER,
            description="Bank description references the system trxID",
            priority=1,
        ),
        MatchingTier(
            name=GROUPED_EXACT_TIER,
            description="Same day, type and amount; equal-sized groups paired by position",
            priority=2,
        ),
    ]


class MatchingConfig(BaseModel):
    """Configuration for the matching engine."""

    reference_prefix: str = "trxID:"
    amount_precision: int = 2
    discrepancy_tolerance: Decimal = Decimal("0.001")
    tiers: list[MatchingTier] = Field(default_factory=_default_tiers)

    @field_validator("amount_precision")
    @classmethod
    def _non_negative_precision(cls, value: int) -> int:
        if value < 0:
            raise ValueError("amount_precision must be >= 0")
        return value

    @field_validator("discrepancy_tolerance")
    @classmethod
    def _non_negative_tolerance(cls, value: Decimal) -> Decimal:
        if value < 0:
            raise ValueError("discrepancy_tolerance must be >= 0")
        return value

    @field_validator("reference_prefix")
    @classmethod
    def _non_empty_prefix(cls, value: str) -> str:
        if not value:
            raise ValueError("reference_prefix must not be empty")
        return value


class JsonOutputConfig(BaseModel):
    """Configuration for the JSON report."""

    indent: int = 2
    include_matches: bool = False


class SheetConfig(BaseModel):
    """Configuration for a report sheet."""

    enabled: bool = True
    name: str


class SheetsConfig(BaseModel):
    """Configuration for all Excel report sheets."""

    summary: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Summary"))
    matched: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Matched Transactions"))
    discrepancies: SheetConfig = Field(
        default_factory=lambda: SheetConfig(name="Discrepancies")
    )
    system_only: SheetConfig = Field(default_factory=lambda: SheetConfig(name="System Only"))
    bank_only: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Bank Only"))


class OutputConfig(BaseModel):
    """Configuration for output."""

    json_report: JsonOutputConfig = Field(default_factory=JsonOutputConfig, alias="json")
    sheets: SheetsConfig = Field(default_factory=SheetsConfig)

    model_config = {"populate_by_name": True}


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


class ReconConfig(BaseModel):
    """Main configuration model for reconciliation."""

    input: InputConfig = Field(default_factory=InputConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    config_file_path: Optional[str] = None


def get_default_config() -> dict[str, Any]:
    """Return the default configuration as a plain dictionary."""
    return ReconConfig().model_dump(
        mode="json", by_alias=True, exclude={"config_file_path"}
    )


def load_config(config_path: Optional[Path] = None) -> ReconConfig:
    """
    Load configuration from a YAML file or use defaults.

    Args:
        config_path: Path to YAML configuration file (optional)

    Returns:
        ReconConfig object with loaded or default settings

    Raises:
        ConfigurationError: If the file is unreadable or holds invalid values
    """
    config_dict = get_default_config()

    if config_path and config_path.exists():
        logger.info(f"Loading configuration from: {config_path}")
        try:
            with open(config_path, "r") as f:
                user_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to read configuration {config_path}: {e}") from e

        if not isinstance(user_config, dict):
            raise ConfigurationError(
                f"Configuration {config_path} must be a mapping at the top level"
            )

        config_dict = _deep_merge(config_dict, user_config)
        config_dict["config_file_path"] = str(config_path)
    else:
        logger.info("Using default configuration")

    try:
        return ReconConfig(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Dictionary to merge on top

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def generate_default_config(output_path: Path) -> None:
    """
    Generate a default configuration file.

    Args:
        output_path: Path to write the configuration file
    """
    config_dict = get_default_config()

    yaml_content = """# Ledger reconciliation configuration
# Generated configuration file - customize as needed

"""
    yaml_content += yaml.dump(config_dict, default_flow_style=False, sort_keys=False)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        f.write(yaml_content)

    logger.info(f"Generated configuration file: {output_path}")
