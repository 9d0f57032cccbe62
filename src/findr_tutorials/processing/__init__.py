"""
Raw data processing: reshape downloaded text tables into Arrow files.
"""

from .ecoli_grn import process_ecoli_grn
from .geuvadis import process_geuvadis
from .reshape import ProcessingReport, make_unique

__all__ = [
    "ProcessingReport",
    "make_unique",
    "process_ecoli_grn",
    "process_geuvadis",
]
