"""
Fair Split - 多人协商分价后端
"""

__version__ = "1.0.0"
