"""
Output of instrumented source.
"""
