"""
Data Generation Module
"""
from .generators import OlistDatasetGenerator

__all__ = ["OlistDatasetGenerator"]
