"""
YOLOL VM Command-Line Interface
===============================

This package provides the command-line tool for the YOLOL VM:

- **yololvm**: load a parsed program, step it and print the resulting state

The tool is a Click-based CLI application with help and error reporting.
"""

__all__ = ["yololvm"]
