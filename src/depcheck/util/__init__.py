"""
Utility modules for depcheck.

- Application-level utilities (application/)
- Graph algorithms (graphalgorithim/)
"""
