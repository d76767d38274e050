"""
CIYield: static cost estimation and optimization advice for CI workflows.
"""

__version__ = "0.1.0"
