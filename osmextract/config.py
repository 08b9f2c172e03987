"""
Configuration settings for the OSM entity extractor
"""

from dataclasses import dataclass
import os

from .errors import ConfigurationError


@dataclass
class ExtractConfig:
    """Extraction settings"""
    # Decode parallelism hint for the stream reader
    workers: int = os.cpu_count() or 1
    
    # Relation member roles used when building polygons
    outer_role: str = "outer"
    inner_role: str = "inner"
    
    # Output settings
    indent: str = "\t"
    compact: bool = False


# Global config instance
config = ExtractConfig()


def get_config() -> ExtractConfig:
    """Get global configuration"""
    return config


def validate_config(config: ExtractConfig) -> None:
    """
    Validate configuration values.
    Raises ConfigurationError listing every invalid value.
    """
    errors = []
    
    if config.workers is None or config.workers < 1:
        errors.append(f"workers must be at least 1, got {config.workers}")
    
    if not config.outer_role:
        errors.append("outer_role is required but not set")
    if not config.inner_role:
        errors.append("inner_role is required but not set")
    if config.outer_role and config.outer_role == config.inner_role:
        errors.append(f"outer_role and inner_role must differ, both are {config.outer_role!r}")
    
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)
