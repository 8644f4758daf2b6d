"""
AI agent system actions: tool catalog, name resolution and appointment scheduling.
"""

__version__ = "1.0.0"
