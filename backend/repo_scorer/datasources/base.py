from typing import Optional, Protocol, Sequence

from ..schemas import RawRepository


class DataSource(Protocol):
    async def search(
        self, language: Optional[str], since: Optional[str], extra_query: Optional[str], limit: int
    ) -> Sequence[RawRepository]:
        ...
