"""Builder base for telemetry records.

Collectors assemble records with chained setters on a mutable builder,
then ``build()`` validates it and freezes the result into a pydantic
model. Only the frozen record is ever serialized onto the wire, and it
carries only the fields that were actually set.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from marsdk.exceptions import InvalidRecordError

BuilderT = TypeVar("BuilderT", bound="RecordBuilder")


class FrozenRecord(BaseModel):
    """Immutable, validated record as it is written to stdout."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Wire representation: set fields only, wire names, declaration order."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class RecordBuilder(ABC):
    """Mutable builder for one record type.

    Subclasses declare ``wire_fields`` as (attribute, wire name) pairs in
    wire order and ``record_model``, the FrozenRecord they build.
    """

    wire_fields: ClassVar[tuple[tuple[str, str], ...]] = ()
    record_model: ClassVar[type[FrozenRecord]]

    @abstractmethod
    def validate(self) -> None:
        """Raise InvalidRecordError if the builder cannot produce a record."""
        ...

    def present_fields(self) -> dict[str, Any]:
        """Set fields keyed by wire name. None counts as unset."""
        present: dict[str, Any] = {}
        for attr, wire in self.wire_fields:
            value = getattr(self, attr)
            if value is not None:
                present[wire] = value
        return present

    def build(self) -> FrozenRecord:
        """Validate and freeze the builder's current state."""
        self.validate()
        try:
            return self.record_model.model_validate(self._record_values())
        except ValidationError as exc:
            raise InvalidRecordError(
                f"{type(self).__name__} could not be frozen: {exc}"
            ) from exc

    def _record_values(self) -> dict[str, Any]:
        return self.present_fields()

    def to_wire(self) -> dict[str, Any]:
        return self.build().to_wire()

    @classmethod
    def _apply(
        cls: type[BuilderT],
        source: Mapping[str, Any],
        setters: Mapping[str, str],
    ) -> BuilderT:
        """Create a builder, feeding each present key through its setter."""
        builder = cls()
        for key, setter in setters.items():
            if key in source:
                getattr(builder, setter)(source[key])
        return builder

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self.present_fields().items())
        return f"{type(self).__name__}({fields})"
