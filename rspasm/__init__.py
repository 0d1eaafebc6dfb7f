"""RSP instruction encoder, register enumerations and a shared-memory model."""

__version__ = "0.1.0"
__all__ = ["registers", "assembler", "spmem"]