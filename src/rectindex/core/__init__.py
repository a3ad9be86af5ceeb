"""
Core data structure and algorithms: rectangles, the R-tree and its split
policy.
"""
