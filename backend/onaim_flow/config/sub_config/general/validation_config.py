"""
Validation Configuration.

Controls optional publish-validation checks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from onaim_flow.config.base import BaseConfig, ConfigField, FieldType, register_config
from onaim_flow.config.sub_config.general.env_utils import env_sync, read_env_defaults


@register_config
@dataclass
class ValidationConfig(BaseConfig):
    """Publish validation settings."""

    report_dangling_edges: bool = True

    _ENV_MAP = {
        "report_dangling_edges": "ONAIM_FLOW_REPORT_DANGLING_EDGES",
    }

    @classmethod
    def get_default_instance(cls) -> "ValidationConfig":
        defaults = read_env_defaults(cls._ENV_MAP, cls.__dataclass_fields__)
        return cls(**defaults)

    @classmethod
    def get_config_name(cls) -> str:
        return "validation"

    @classmethod
    def get_display_name(cls) -> str:
        return "Publish Validation"

    @classmethod
    def get_description(cls) -> str:
        return "Optional checks run before a flow or composite is published."

    @classmethod
    def get_icon(cls) -> str:
        return "check"

    @classmethod
    def get_fields_metadata(cls) -> List[ConfigField]:
        return [
            ConfigField(
                name="report_dangling_edges",
                field_type=FieldType.BOOLEAN,
                label="Report Dangling Edges",
                description="Warn about edges that reference nodes missing from the graph",
                default=True,
                group="validation",
                apply_change=env_sync("ONAIM_FLOW_REPORT_DANGLING_EDGES"),
            ),
        ]
