"""
Config Base — dataclass config sections with field metadata.

Each section is a ``@dataclass`` subclass of ``BaseConfig`` decorated
with ``@register_config``. Sections describe their own fields through
``get_fields_metadata`` and read their defaults from environment
variables in ``get_default_instance``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from logging import getLogger
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

logger = getLogger(__name__)


class FieldType(str, Enum):
    STRING = "string"
    PASSWORD = "password"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SELECT = "select"
    TEXTAREA = "textarea"
    PATH = "path"


@dataclass
class ConfigField:
    """UI / documentation metadata for one config field."""
    name: str
    field_type: FieldType
    label: str
    description: str = ""
    default: Any = None
    required: bool = False
    placeholder: str = ""
    options: List[Dict[str, str]] = field(default_factory=list)
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    group: str = "general"
    secure: bool = False
    # Called with the new value after the field changes.
    apply_change: Optional[Callable[[Any], None]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.field_type.value,
            "label": self.label,
            "description": self.description,
            "default": self.default,
            "required": self.required,
            "placeholder": self.placeholder,
            "options": self.options,
            "min": self.min_value,
            "max": self.max_value,
            "group": self.group,
            "secure": self.secure,
        }


C = TypeVar("C", bound="BaseConfig")


@dataclass
class BaseConfig:
    """Base for config sections."""

    @classmethod
    def get_default_instance(cls: Type[C]) -> C:
        return cls()

    @classmethod
    def get_config_name(cls) -> str:
        raise NotImplementedError

    @classmethod
    def get_display_name(cls) -> str:
        return cls.get_config_name()

    @classmethod
    def get_description(cls) -> str:
        return ""

    @classmethod
    def get_category(cls) -> str:
        return "general"

    @classmethod
    def get_icon(cls) -> str:
        return "settings"

    @classmethod
    def get_fields_metadata(cls) -> List[ConfigField]:
        return []

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def update(self, values: Dict[str, Any]) -> None:
        """Apply new values, running each field's ``apply_change`` hook."""
        metadata = {f.name: f for f in self.get_fields_metadata()}
        for name, value in values.items():
            if name not in self.__dataclass_fields__:
                raise KeyError(f"Unknown field '{name}' for config '{self.get_config_name()}'")
            setattr(self, name, value)
            meta = metadata.get(name)
            if meta and meta.apply_change:
                meta.apply_change(value)
        logger.info(f"Config updated: {self.get_config_name()} ({', '.join(values)})")


# ── Registry ──

_CONFIG_REGISTRY: Dict[str, Type[BaseConfig]] = {}


def register_config(cls: Type[C]) -> Type[C]:
    """Class decorator that makes a config section discoverable by name."""
    _CONFIG_REGISTRY[cls.get_config_name()] = cls
    return cls


def get_config_class(name: str) -> Type[BaseConfig]:
    try:
        return _CONFIG_REGISTRY[name]
    except KeyError:
        raise KeyError(f"Unknown config section: {name}") from None


def list_config_classes() -> List[Type[BaseConfig]]:
    return list(_CONFIG_REGISTRY.values())


def load_config(name: str) -> BaseConfig:
    """Build a section from its defaults (environment included)."""
    return get_config_class(name).get_default_instance()
