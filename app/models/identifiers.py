import uuid
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema


class EntityId(str):
    """Opaque identifier with canonical equality.

    Values that parse as UUIDs are normalized to the lowercase hyphenated
    form; anything else is kept as its stripped string. Equality and hashing
    follow the normalized form, so ``EntityId("ABC-...")`` matches the
    identifier a token or a path parameter carries.
    """

    def __new__(cls, value: Any) -> "EntityId":
        if isinstance(value, EntityId):
            return value
        return super().__new__(cls, cls.canonicalize(value))

    @staticmethod
    def canonicalize(value: Any) -> str:
        if isinstance(value, uuid.UUID):
            return str(value)
        text = str(value).strip()
        try:
            return str(uuid.UUID(text))
        except ValueError:
            return text

    @classmethod
    def new(cls) -> "EntityId":
        return cls(uuid.uuid4())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (str, uuid.UUID)):
            return str.__eq__(self, EntityId.canonicalize(other))
        return NotImplemented

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return str.__hash__(self)

    def __repr__(self) -> str:
        return f"EntityId({str.__repr__(self)})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls,
            core_schema.str_schema(),
            serialization=core_schema.to_string_ser_schema(),
        )
