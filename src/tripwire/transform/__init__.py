"""
The rewrite pass and the sentinel fragments it inserts.
"""

from .rewriter import Rewriter, RewrittenFile, SkipSet, rewrite
from .sentinel import DEFAULT_SENTINEL, SentinelCall, WrappedStatement

__all__ = [
    "Rewriter",
    "RewrittenFile",
    "SkipSet",
    "rewrite",
    "DEFAULT_SENTINEL",
    "SentinelCall",
    "WrappedStatement",
]
