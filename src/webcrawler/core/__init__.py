"""
Core configuration, errors and URL utilities
"""
