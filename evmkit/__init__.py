"""EVM opcode definitions and basic-block bytecode analysis."""

__version__ = "0.1.0"
__all__ = ["opcodes", "analysis"]