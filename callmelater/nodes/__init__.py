"""Workflow nodes for CallMeLater."""

from typing import Dict, Type

from callmelater.nodes.action import CallMeLaterNode
from callmelater.nodes.base import BaseNode, NodeProperty, PropertyOption
from callmelater.nodes.trigger import CallMeLaterTrigger

NODE_TYPES: Dict[str, Type[BaseNode]] = {
    CallMeLaterNode.NAME: CallMeLaterNode,
    CallMeLaterTrigger.NAME: CallMeLaterTrigger,
}

__all__ = [
    "BaseNode",
    "CallMeLaterNode",
    "CallMeLaterTrigger",
    "NODE_TYPES",
    "NodeProperty",
    "PropertyOption",
]
