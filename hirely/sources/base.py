from abc import ABC, abstractmethod

from hirely.models import Job


class JobSearchBase(ABC):
    """A third-party listing API mapped onto the canonical Job shape.

    ``search`` never raises: any provider failure yields whatever was
    collected so far, usually an empty list.
    """

    name: str = "unknown"

    @abstractmethod
    def search(self, query: str, location_hint: str | None = None, page_budget: int = 1) -> list[Job]:
        pass

    @property
    def configured(self) -> bool:
        return True
