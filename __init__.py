"""
Linesmith - small line-oriented helpers for keeping Java sources tidy.

This package provides:
- retab: expand tabs to spaces and strip trailing spaces in place, across a tree
- string_const: turn a block of text into a quoted Java string constant, and back
"""

__version__ = "1.0.0"
__author__ = "tboy1337"
