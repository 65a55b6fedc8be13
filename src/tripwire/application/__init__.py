"""
Instrumentation driver, configuration and error types.
"""
