"""
Teeny Command-Line Interface
============================

- **teenyc**: compile a Teeny source file to C

The tool is a Click application; see ``teenyc --help``.
"""

__all__ = ["teenyc"]
