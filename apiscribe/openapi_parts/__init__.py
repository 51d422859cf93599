"""Modular pieces for the OpenAPI document assembler.

This package holds constants and helpers that the assembler, the builder
and the component layer share, so each of them stays focused on its own
step of the assembly.
"""

__all__ = [
    "constants",
    "helpers",
]
