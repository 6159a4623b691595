"""
data_model — data structures shared by the interchange pipeline.

Usage:
  from data_model import Node, Mark, NodeType, Heading, Section, TextFragment

Modules:
  documents — Node, Mark, NodeType, MarkType (document tree),
              Heading, Section (derived views over Markdown),
              TextFragment (positioned PDF text)
"""

from .documents import (
    CELL_TYPES,
    LIST_TYPES,
    Heading,
    Mark,
    MarkType,
    Node,
    NodeType,
    Section,
    TextFragment,
    as_node,
    doc,
    heading_level,
    node_kind,
    text_node,
)

__all__ = [
    # tree
    "Node",
    "Mark",
    "NodeType",
    "MarkType",
    "LIST_TYPES",
    "CELL_TYPES",
    "node_kind",
    "as_node",
    "doc",
    "heading_level",
    "text_node",
    # records
    "Heading",
    "Section",
    "TextFragment",
]
