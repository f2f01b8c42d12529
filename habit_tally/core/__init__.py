"""
Core modules for Habit Tally.

This package contains the record lifecycle, input coercion, error
taxonomy and export functionality.
"""
