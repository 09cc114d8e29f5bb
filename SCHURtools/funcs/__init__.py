"""
SCHURtools computational modules: small shifted solves, block
classification, eigenvector back-substitution, block swaps, reordering and
eigenvalue selection.
"""
