"""
Utilities package initialization
"""

from webcrawler.utils.parser import extract_page

__all__ = ["extract_page"]
