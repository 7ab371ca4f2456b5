"""
Configuration module for the bank-text extraction engine.

This module contains the extraction and matching configuration dictionaries
and the CSV loader for institution patterns.
"""

from .pipeline_config import EXTRACTION_CONFIG, MATCHING_CONFIG
from .institution_loader import load_institutions_csv

__all__ = [
    "EXTRACTION_CONFIG",
    "MATCHING_CONFIG",
    "load_institutions_csv",
]
