"""Column types shared by the InternHub models"""
from sqlalchemy import TypeDecorator, String
import uuid


def generate_uuid() -> str:
    """New primary key value as a string"""
    return str(uuid.uuid4())


class GUID(TypeDecorator):
    """UUID stored as VARCHAR(36) so SQLite and PostgreSQL share one schema.

    Values always come back as ``str``; callers compare ids as strings.
    """
    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return str(value)
