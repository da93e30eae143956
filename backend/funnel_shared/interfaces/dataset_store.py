"""
Dataset Store Interface
Abstract interface for persisting parsed XML datasets per tenant + dashboard
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from funnel_shared.models.xml_dataset import DatasetUploadRecord


class DatasetStoreInterface(ABC):
    """
    Contract for the tenant/dataset store.

    The parsing engine never talks to a store; the HTTP layer parses first and
    persists the outcome through this interface.
    """

    @abstractmethod
    async def save(
        self, tenant_id: str, dashboard_id: str, record: DatasetUploadRecord
    ) -> DatasetUploadRecord:
        """
        Persist (replace) the dataset for a tenant dashboard.

        Returns:
            The stored record
        """
        raise NotImplementedError

    @abstractmethod
    async def get(self, tenant_id: str, dashboard_id: str) -> Optional[DatasetUploadRecord]:
        """Return the stored dataset, or None when nothing was uploaded yet."""
        raise NotImplementedError

    @abstractmethod
    async def update_selected_columns(
        self, tenant_id: str, dashboard_id: str, columns: List[str]
    ) -> DatasetUploadRecord:
        """
        Persist a user-chosen subset of availableColumns.

        Raises:
            DatasetNotFoundError: no dataset stored for the dashboard
            UnknownColumnsError: a column is not part of availableColumns
        """
        raise NotImplementedError
