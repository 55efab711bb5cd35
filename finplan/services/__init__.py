"""
Services Package

External boundaries of the calculation engine: data storage (read-only)
and the calculation result cache.
"""
