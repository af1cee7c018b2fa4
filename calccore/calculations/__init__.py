"""
Quantitative Calculation Engine

Stateless calculation modules shared by the loan, annuity, valuation,
portfolio and health calculators. Every function is a pure function of its
inputs.
"""

from calccore.calculations import amortization, annuity, scenarios, series, bands, band_tables

__all__ = ["amortization", "annuity", "scenarios", "series", "bands", "band_tables"]
