"""
qpml - Query Plan Markup Language
"""

__version__ = "0.4.0"
