"""
Utility modules for tripwire.

- Type-based dispatch used by the rewrite pass (typedispatch.py)
"""
