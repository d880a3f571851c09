from abc import ABC, abstractmethod
from typing import List, Optional

from ballknowledge.analysis_pipeline.models import AnalysisRecord


class AnalysisStore(ABC):
    """
    Persistence for composed analysis records, owned by the surrounding service.

    Implementations store the identifier, mode, subject snapshot, the full
    evaluation mapping, the highlight list and the creation time, and index
    them per owner. ``AnalysisRecord.to_document`` / ``from_document`` give the
    stored shape.
    """

    @abstractmethod
    async def save(self, owner_id: str, record: AnalysisRecord) -> str:
        """Store a record and return its identifier."""
        pass

    @abstractmethod
    async def get(self, owner_id: str, record_id: str) -> Optional[AnalysisRecord]:
        """Fetch one record owned by owner_id, or None."""
        pass

    @abstractmethod
    async def list_for_owner(self, owner_id: str) -> List[AnalysisRecord]:
        """All records of an owner, most recent first."""
        pass

    @abstractmethod
    async def delete(self, owner_id: str, record_id: str) -> bool:
        """Delete a record; False when nothing matched."""
        pass
