"""Concrete builders shipped with treeprotocol."""

from .list_builder import ListBuilder, to_literal
from .object_builder import BuiltNode, NodeDraft, NodeSchema, ObjectBuilder
from .forwarding import ForwardingBuilder

__all__ = [
    'ListBuilder',
    'to_literal',
    'ObjectBuilder',
    'NodeSchema',
    'NodeDraft',
    'BuiltNode',
    'ForwardingBuilder',
]
