"""
E-Commerce Business Report

Joins the order, payment, product and review snapshots of an e-commerce
marketplace and computes the summary tables behind the business report.
"""

__version__ = "1.0.0"
