"""
Alembic Migration Helpers - Reusable functions for idempotent migrations

Usage in migrations:
    from helpers import create_enum_safe, create_table_safe, create_index_safe

    def upgrade():
        create_enum_safe(op, 'myenum', ['value1', 'value2'])
        create_table_safe(op, 'mytable', '''
            id VARCHAR(36) PRIMARY KEY,
            name VARCHAR(255) NOT NULL
        ''')
        create_index_safe(op, 'ix_mytable_name', 'mytable', ['name'])
"""


def create_enum_safe(operation, enum_name: str, values: list):
    """
    Create an enum type safely (idempotent - won't fail if exists)

    Args:
        operation: The alembic op object
        enum_name: Name of the enum type
        values: List of enum values
    """
    values_str = ", ".join([f"'{v}'" for v in values])
    operation.execute(f"""
        DO $$ BEGIN
            CREATE TYPE {enum_name} AS ENUM ({values_str});
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)


def drop_enum_safe(operation, enum_name: str):
    operation.execute(f"DROP TYPE IF EXISTS {enum_name} CASCADE")


def create_table_safe(operation, table_name: str, columns_sql: str):
    """
    Create a table safely using IF NOT EXISTS

    Args:
        operation: The alembic op object
        table_name: Name of the table
        columns_sql: SQL for columns and constraints (without CREATE TABLE wrapper)
    """
    operation.execute(f"""
        CREATE TABLE IF NOT EXISTS {table_name} (
            {columns_sql}
        )
    """)


def drop_table_safe(operation, table_name: str):
    operation.execute(f"DROP TABLE IF EXISTS {table_name} CASCADE")


def create_index_safe(operation, index_name: str, table_name: str, columns: list, unique: bool = False):
    """
    Create an index safely using IF NOT EXISTS

    Args:
        operation: The alembic op object
        index_name: Name of the index
        table_name: Name of the table
        columns: List of column names
        unique: Create a UNIQUE index
    """
    columns_str = ", ".join(columns)
    unique_sql = "UNIQUE " if unique else ""
    operation.execute(f"""
        CREATE {unique_sql}INDEX IF NOT EXISTS {index_name} ON {table_name}({columns_str})
    """)
