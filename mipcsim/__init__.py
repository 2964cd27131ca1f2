"""Building blocks for a cycle-level pipelined MIPS simulator: instructions, memory, latches, decode and execute."""

__version__ = "0.1.0"

__all__ = ["__version__"]