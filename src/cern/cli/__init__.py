"""
cern Command-Line Interface
===========================

- **cernc**: compile a cern program to C++ and build it

The tool is a Click application with built-in help and consistent
exit codes (see cern.cli.errors.ExitCode).
"""

__all__ = ["cernc"]
