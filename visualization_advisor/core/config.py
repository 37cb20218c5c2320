"""Configuration parsing and validation."""

import os
from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

from visualization_advisor.core import constants
from visualization_advisor.core.exceptions import ConfigError, ConfigValidationError


@dataclass
class AdvisorConfig:
    """
    Runtime thresholds for ingestion, profiling, recommendation and synthesis.

    Every field defaults to the value documented in core.constants. Instances
    are passed explicitly into each component instead of reading module
    globals, so two pipelines can run side by side with different limits.

    Example:
        >>> config = AdvisorConfig(max_rows_to_keep=1_000, max_chunk_collect=5_000)
        >>> pipeline = IngestionPipeline(config)
    """

    # Ingestion
    chunk_size: int = constants.DEFAULT_CHUNK_SIZE
    max_rows_to_keep: int = constants.MAX_ROWS_TO_KEEP
    max_chunk_collect: int = constants.MAX_CHUNK_COLLECT
    fingerprint_sample_size: int = constants.FINGERPRINT_SAMPLE_SIZE
    random_seed: Optional[int] = constants.DEFAULT_RANDOM_SEED
    json_read_block_size: int = constants.JSON_READ_BLOCK_SIZE

    # Type inference
    ordinal_cardinality_ratio: float = constants.ORDINAL_CARDINALITY_RATIO

    # Profiling
    outlier_iqr_multiplier: float = constants.OUTLIER_IQR_MULTIPLIER
    trend_change_threshold: float = constants.TREND_CHANGE_THRESHOLD
    skewness_threshold: float = constants.SKEWNESS_THRESHOLD
    multimodality_kurtosis_threshold: float = constants.MULTIMODALITY_KURTOSIS_THRESHOLD
    high_variance_cv_threshold: float = constants.HIGH_VARIANCE_CV_THRESHOLD
    linear_correlation_threshold: float = constants.LINEAR_CORRELATION_THRESHOLD
    sparse_density_threshold: float = constants.SPARSE_DENSITY_THRESHOLD
    dense_density_threshold: float = constants.DENSE_DENSITY_THRESHOLD

    # Recommendation
    max_recommendations: int = constants.MAX_RECOMMENDATIONS
    strong_relationship_threshold: float = constants.STRONG_RELATIONSHIP_THRESHOLD
    max_comparison_categories: int = constants.MAX_COMPARISON_CATEGORIES
    max_part_to_whole_categories: int = constants.MAX_PART_TO_WHOLE_CATEGORIES
    long_label_length: int = constants.LONG_LABEL_LENGTH
    max_tooltip_fields: int = constants.MAX_TOOLTIP_FIELDS

    # Synthesis
    independent_scales_supported: bool = True

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """
        Check value ranges.

        Raises:
            ConfigValidationError: If a value is out of range
        """
        for name in ('chunk_size', 'max_rows_to_keep', 'max_chunk_collect',
                     'fingerprint_sample_size', 'json_read_block_size',
                     'max_recommendations', 'max_tooltip_fields'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ConfigValidationError(
                    f"{name} must be a positive integer",
                    field=name,
                    expected="> 0",
                    actual=repr(value)
                )

        if self.max_chunk_collect < self.max_rows_to_keep:
            raise ConfigValidationError(
                "max_chunk_collect must be greater than or equal to max_rows_to_keep",
                field="max_chunk_collect",
                expected=f">= {self.max_rows_to_keep}",
                actual=repr(self.max_chunk_collect)
            )

        for name in ('ordinal_cardinality_ratio', 'sparse_density_threshold',
                     'dense_density_threshold', 'linear_correlation_threshold',
                     'strong_relationship_threshold'):
            value = getattr(self, name)
            if not 0.0 <= float(value) <= 1.0:
                raise ConfigValidationError(
                    f"{name} must be between 0 and 1",
                    field=name,
                    expected="0.0 - 1.0",
                    actual=repr(value)
                )

        if self.sparse_density_threshold > self.dense_density_threshold:
            raise ConfigValidationError(
                "sparse_density_threshold cannot exceed dense_density_threshold",
                field="sparse_density_threshold"
            )

    @classmethod
    def from_dict(cls, config_dict: Optional[Dict[str, Any]]) -> "AdvisorConfig":
        """
        Build a configuration from a plain dictionary.

        Args:
            config_dict: Mapping of field name to value; None gives defaults

        Returns:
            AdvisorConfig instance

        Raises:
            ConfigValidationError: On unknown keys or out-of-range values
        """
        config_dict = config_dict or {}
        if not isinstance(config_dict, dict):
            raise ConfigValidationError(
                "Configuration must be a mapping",
                expected="mapping",
                actual=type(config_dict).__name__
            )

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(config_dict) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration keys: {', '.join(unknown)}",
                field=unknown[0]
            )

        return cls(**config_dict)

    @classmethod
    def from_yaml(cls, config_path: str) -> "AdvisorConfig":
        """
        Load configuration from a YAML file.

        The file may hold the settings at top level or under an 'advisor' key.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            AdvisorConfig instance

        Raises:
            ConfigError: If the file is missing, too large, or not valid YAML
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

        file_size = os.path.getsize(config_file)
        if file_size > constants.MAX_YAML_FILE_SIZE:
            raise ConfigError(
                f"Configuration file too large: {file_size:,} bytes. "
                f"Maximum allowed: {constants.MAX_YAML_FILE_SIZE:,} bytes"
            )

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML file: {str(e)}")
        except UnicodeDecodeError as e:
            raise ConfigError(f"Invalid file encoding (expected UTF-8): {str(e)}")

        if isinstance(config_dict, dict) and 'advisor' in config_dict:
            config_dict = config_dict['advisor']

        return cls.from_dict(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return asdict(self)
