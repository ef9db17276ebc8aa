"""Example scaffolding utilities for ``yodel``."""

from .generate import ExampleSpec, generate_examples

__all__ = [
    "ExampleSpec",
    "generate_examples",
]
