"""
Go frontend: Tree-sitter parsing and the node view used by the rewriter.
"""
