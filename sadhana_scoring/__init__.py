"""Sadhana scoring engine.

Maps daily practice logs plus a batch's criteria to point scores, and
rolls a week of logs up into weekly statistics for devotees and groups.
"""

__version__ = "1.0.0"
