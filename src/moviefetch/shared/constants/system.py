"""
System-level base units shared by the other constant modules.
"""

BASE_SECOND = 1.0
