from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Upper bound of the Integer columns
MAX_DB_INT = 2_147_483_647


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateModel(CamelModel):
    # Server-assigned fields (id, status, createdAt, ...) are rejected as extras.
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


class OutModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ErrorResponse(BaseModel):
    error: str
    details: list[dict] = Field(default_factory=list)


class HealthOut(BaseModel):
    status: str
