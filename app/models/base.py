from collections.abc import Mapping
from datetime import datetime
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict

from app.core.timezone import utc_now

# Id carried by records that have not been written to the database yet
UNASSIGNED_ID = -1


class ImmutableRecord(BaseModel):
    """Frozen domain record compared by its identifier only.

    Updates never mutate an instance; ``with_changes`` builds a new one with a
    fresh ``last_update`` / ``last_updated_by``. ``model_copy(update=...)`` is
    validated like construction.
    """

    model_config = ConfigDict(frozen=True)

    id_field: ClassVar[str]

    @property
    def record_id(self) -> int:
        return getattr(self, self.id_field)

    @property
    def is_persisted(self) -> bool:
        return self.record_id != UNASSIGNED_ID

    def __eq__(self, other: object) -> bool:
        if isinstance(other, type(self)):
            return self.record_id == other.record_id
        return False

    def __hash__(self) -> int:
        return hash(self.record_id)

    def with_changes(self, updated_by: str, at: datetime | None = None, **changes: Any) -> Self:
        data = self.model_dump()
        data.update(changes)
        data["last_update"] = at or utc_now()
        data["last_updated_by"] = updated_by
        return type(self).model_validate(data)

    def model_copy(self, *, update: Mapping[str, Any] | None = None, deep: bool = False) -> Self:
        # Updated copies are re-validated so timestamp fields stay relabeled to UTC
        if not update:
            return super().model_copy(deep=deep)
        data = self.model_dump()
        data.update(update)
        return type(self).model_validate(data)
