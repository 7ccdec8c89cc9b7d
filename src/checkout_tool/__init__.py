"""
Checkout Tool Package

A point-of-sale checkout: scan SKUs, price them against a reloadable
rule file with bundle specials, query the running total.
"""

__version__ = "1.0.0"
