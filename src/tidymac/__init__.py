"""tidymac - interactive Mac disk cleanup."""

__version__ = "0.1.0"
