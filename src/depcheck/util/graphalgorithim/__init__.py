"""
Graph algorithms for control flow analysis.

- Dominator analysis for directed graphs given as successor mappings
"""
