"""
depcheck CLI tools.

This package contains the command-line tools for depcheck:
- cdg: Compute and export control dependence graphs
- postdom: Print post-dominator trees
"""

from .main import main
