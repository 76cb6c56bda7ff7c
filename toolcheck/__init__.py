"""
toolcheck — prerequisite checker for the Windows build wrapper.
"""

__version__ = "0.1.0"
