"""Utilities for ordering samples in stacked bar charts of composition data.

This package provides modular building blocks to validate (sample, category,
value) tables, assign each sample its peak category, rank samples within each
peak block, and render before/after stacked bar comparisons.
"""
