"""Diagnostics package.

Command-line checks run through ``worldcal diag <tool>``.
"""

__all__ = ["round_trip", "year_table"]
