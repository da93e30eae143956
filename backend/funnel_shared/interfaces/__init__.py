"""
Abstract interfaces shared across XML Funnel components
"""

from .dataset_store import DatasetStoreInterface

__all__ = ["DatasetStoreInterface"]
