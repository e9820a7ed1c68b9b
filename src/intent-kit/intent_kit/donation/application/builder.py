"""DonationBuilder — fluent, copy-on-write construction of a donatable item."""

import copy
import dataclasses
from typing import Any

from pydantic import BaseModel, ValidationError

from intent_kit.donation.application.dispatcher import DonationDispatcher
from intent_kit.donation.domain.errors import (
    MissingParameterError,
    ValidationFailedError,
)


class DonationBuilder[T]:
    """Builds an item field by field, then donates it.

    Every ``with_*`` call returns a new builder; the original builder and the
    item it wraps are left untouched.
    """

    def __init__(
        self,
        item: T,
        metadata: dict[str, Any] | None = None,
        required: tuple[str, ...] = (),
    ) -> None:
        self._item = item
        self._metadata = dict(metadata or {})
        self._required = required

    @property
    def metadata(self) -> dict[str, Any]:
        return dict(self._metadata)

    def with_value(self, field: str, value: Any) -> "DonationBuilder[T]":
        """Return a builder whose item has field set to value.

        Raises:
            ValidationFailedError: if the item has no such field, or a pydantic
                item rejects the value.
        """
        return DonationBuilder(
            item=_replace_field(self._item, field, value),
            metadata=self._metadata,
            required=self._required,
        )

    def with_metadata(self, key: str, value: Any) -> "DonationBuilder[T]":
        return DonationBuilder(
            item=self._item,
            metadata={**self._metadata, key: value},
            required=self._required,
        )

    def require(self, *fields: str) -> "DonationBuilder[T]":
        """Mark fields that must be non-None when build() is called."""
        return DonationBuilder(
            item=self._item,
            metadata=self._metadata,
            required=(*self._required, *fields),
        )

    def build(self) -> T:
        """Return the item.

        Raises:
            MissingParameterError: for the first required field that is None.
        """
        for field in self._required:
            if getattr(self._item, field, None) is None:
                raise MissingParameterError(parameter=field)
        return self._item

    async def donate(self, dispatcher: DonationDispatcher) -> None:
        await dispatcher.donate(self.build())


def _replace_field[T](item: T, field: str, value: Any) -> T:
    if isinstance(item, BaseModel):
        if field not in type(item).model_fields:
            raise ValidationFailedError(f"{type(item).__name__} has no field {field!r}")
        try:
            return type(item).model_validate({**item.model_dump(), field: value})
        except ValidationError as exc:
            raise ValidationFailedError(str(exc)) from exc

    if dataclasses.is_dataclass(item) and not isinstance(item, type):
        names = {f.name for f in dataclasses.fields(item)}
        if field not in names:
            raise ValidationFailedError(f"{type(item).__name__} has no field {field!r}")
        return dataclasses.replace(item, **{field: value})

    if not hasattr(item, field):
        raise ValidationFailedError(f"{type(item).__name__} has no field {field!r}")
    updated = copy.copy(item)
    setattr(updated, field, value)
    return updated
