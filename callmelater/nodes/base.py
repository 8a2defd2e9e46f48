"""Node descriptions shared by the CallMeLater action and trigger nodes."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, Field

from callmelater.host import NodeParameters

PropertyType = Literal["string", "number", "boolean", "options", "multiOptions", "json", "collection"]


class PropertyOption(BaseModel):
    name: str
    value: str
    description: str = ""


class NodeProperty(BaseModel):
    """One form field the host renders for a node."""

    name: str
    display_name: str
    type: PropertyType = "string"
    default: Any = None
    required: bool = False
    description: str = ""
    placeholder: str = ""
    password: bool = False
    options: List[PropertyOption] = Field(default_factory=list)
    # Collection entries; only meaningful for type == "collection".
    children: List["NodeProperty"] = Field(default_factory=list)
    # Only shown (and only read) for these operations; empty means always.
    show_for_operations: List[str] = Field(default_factory=list)

    def option_values(self) -> List[str]:
        return [option.value for option in self.options]


def options(*pairs: tuple[str, str]) -> List[PropertyOption]:
    """Shorthand for building ``(name, value)`` option lists."""
    return [PropertyOption(name=name, value=value) for name, value in pairs]


class BaseNode:
    """Base class for the nodes exposed to the workflow host."""

    NAME: str = ""
    DISPLAY_NAME: str = ""
    DESCRIPTION: str = ""
    VERSION: int = 1
    GROUP: str = "transform"
    CREDENTIALS: List[Dict[str, Any]] = []
    PROPERTIES: List[NodeProperty] = []

    @classmethod
    def get_metadata(cls) -> Dict[str, Any]:
        """Return node metadata."""
        return {
            "name": cls.NAME,
            "display_name": cls.DISPLAY_NAME,
            "description": cls.DESCRIPTION or cls.__doc__ or "No description provided",
            "version": cls.VERSION,
            "group": cls.GROUP,
            "credentials": list(cls.CREDENTIALS),
            "properties": [prop.model_dump() for prop in cls.PROPERTIES],
        }

    @classmethod
    def get_property(cls, name: str) -> Optional[NodeProperty]:
        for prop in cls.PROPERTIES:
            if prop.name == name:
                return prop
        return None

    @classmethod
    def get_defaults(cls) -> Dict[str, Any]:
        """Defaults for every optional top-level property.

        Required properties have no default so a missing value is an error.
        Collections default to an empty mapping.
        """
        defaults: Dict[str, Any] = {}
        for prop in cls.PROPERTIES:
            if prop.required:
                continue
            if prop.type == "collection":
                defaults.setdefault(prop.name, {})
            elif prop.default is not None:
                defaults.setdefault(prop.name, prop.default)
        return defaults

    @classmethod
    def parameters(
        cls,
        values: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]],
    ) -> NodeParameters:
        """A ``ParameterSource`` over *values* that falls back to this node's defaults."""
        return NodeParameters(values, defaults=cls.get_defaults(), node=cls.NAME)
