"""
Report Export Module
"""
from .exporter import build_summary, export_report

__all__ = ["build_summary", "export_report"]
