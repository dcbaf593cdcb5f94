"""Concrete implementations of provider interfaces."""

from .graph import InMemoryGraphSink, create_sink
from .graph.neo4j import Neo4jGraphSink

__all__ = [
    "InMemoryGraphSink",
    "Neo4jGraphSink",
    "create_sink",
]
