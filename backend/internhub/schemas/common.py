from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    @field_serializer(
        'start_date', 'end_date', 'created_at', 'updated_at',
        mode='wrap', when_used='json', check_fields=False,
    )
    def serialize_utc(self, value, handler):
        # Stored datetimes are naive UTC; put the offset back on the wire
        if isinstance(value, datetime) and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return handler(value)


class MessageResponse(CamelModel):
    message: str
