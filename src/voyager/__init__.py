"""
Voyager - Voice Routing Service

Turns spoken map requests into seed-category filters, local searches, or
navigation targets, and owns the map presentation state they produce.
"""

__version__ = "1.0.0"
