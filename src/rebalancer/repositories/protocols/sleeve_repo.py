"""Sleeve and allocation model repository protocols."""

from typing import Protocol, Optional

from rebalancer.domain.models import AllocationModel, Sleeve


class SleeveRepository(Protocol):
    """Interface for sleeve data access."""

    def create(self, sleeve: Sleeve) -> Sleeve:
        """Persist a new sleeve with its members."""
        ...

    def get_by_id(self, sleeve_id: str) -> Optional[Sleeve]:
        ...

    def get_by_name(self, name: str) -> Optional[Sleeve]:
        ...

    def list_all(self) -> list[Sleeve]:
        """List all sleeves ordered by name."""
        ...

    def update(self, sleeve: Sleeve) -> Sleeve:
        """Replace a sleeve's name, flags and members."""
        ...

    def delete(self, sleeve_id: str) -> None:
        ...


class AllocationModelRepository(Protocol):
    """Interface for allocation model data access."""

    def create(self, model: AllocationModel) -> AllocationModel:
        ...

    def get_by_id(self, model_id: str) -> Optional[AllocationModel]:
        ...

    def get_by_name(self, name: str) -> Optional[AllocationModel]:
        ...

    def list_all(self) -> list[AllocationModel]:
        ...

    def update(self, model: AllocationModel) -> AllocationModel:
        """Replace a model's name, description and members."""
        ...

    def delete(self, model_id: str) -> None:
        ...
