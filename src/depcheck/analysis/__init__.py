"""Analysis modules for depcheck.

- cfg: Control flow graphs and post-dominator trees
- cdg: Control Dependence Graph construction and export
- ddg: Aggregation of memory data dependence query results
"""
