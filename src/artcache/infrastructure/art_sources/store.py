"""Art source "db": the original that is already stored."""

from artcache.domain.entities import Candidate
from artcache.domain.ports import GatherOptions, IArtSource, IImageStore
from artcache.domain.value_objects import ORIGINAL, ArtKey


class StoreArtSource(IArtSource):
    """Yields a db candidate when the store already holds an original."""

    def __init__(self, store: IImageStore) -> None:
        self.store = store

    @property
    def name(self) -> str:
        return "db"

    async def gather(
        self, key: ArtKey, limit: int | None, options: GatherOptions
    ) -> list[Candidate]:
        record = await self.store.get_size(key, ORIGINAL)
        if record is None:
            return []
        return [Candidate(mime=record.mime, db=True)]
