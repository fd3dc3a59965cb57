"""
Storage Configuration.

Controls where flows, composite nodes and dynamic node types are stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List

from onaim_flow.config.base import BaseConfig, ConfigField, FieldType, register_config
from onaim_flow.config.sub_config.general.env_utils import env_sync, read_env_defaults

DEFAULT_STORAGE_DIR = str(Path(__file__).resolve().parents[4] / "storage")


@register_config
@dataclass
class StorageConfig(BaseConfig):
    """Location of the JSON stores."""

    storage_dir: str = DEFAULT_STORAGE_DIR

    _ENV_MAP = {
        "storage_dir": "ONAIM_FLOW_STORAGE_DIR",
    }

    @classmethod
    def get_default_instance(cls) -> "StorageConfig":
        defaults = read_env_defaults(cls._ENV_MAP, cls.__dataclass_fields__)
        return cls(**defaults)

    @classmethod
    def get_config_name(cls) -> str:
        return "storage"

    @classmethod
    def get_display_name(cls) -> str:
        return "Storage"

    @classmethod
    def get_description(cls) -> str:
        return "Directory holding flows, composite nodes and custom node types."

    @classmethod
    def get_icon(cls) -> str:
        return "folder"

    @property
    def flows_dir(self) -> Path:
        return Path(self.storage_dir) / "flows"

    @property
    def composites_dir(self) -> Path:
        return Path(self.storage_dir) / "composites"

    @property
    def node_types_dir(self) -> Path:
        return Path(self.storage_dir) / "node_types"

    @classmethod
    def get_fields_metadata(cls) -> List[ConfigField]:
        return [
            ConfigField(
                name="storage_dir",
                field_type=FieldType.PATH,
                label="Storage Directory",
                description="Root directory; flows/, composites/ and node_types/ are created inside it",
                default=DEFAULT_STORAGE_DIR,
                required=True,
                group="storage",
                apply_change=env_sync("ONAIM_FLOW_STORAGE_DIR"),
            ),
        ]
