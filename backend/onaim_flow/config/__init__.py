"""
Configuration sections.

Importing this package registers every section with ``register_config``.
"""

from onaim_flow.config.base import (
    BaseConfig,
    ConfigField,
    FieldType,
    get_config_class,
    list_config_classes,
    load_config,
    register_config,
)
from onaim_flow.config.sub_config.general.storage_config import StorageConfig
from onaim_flow.config.sub_config.general.validation_config import ValidationConfig

__all__ = [
    "BaseConfig",
    "ConfigField",
    "FieldType",
    "get_config_class",
    "list_config_classes",
    "load_config",
    "register_config",
    "StorageConfig",
    "ValidationConfig",
]
