"""create users, internships and remarks tables

Revision ID: internhub_001
Revises:
Create Date: 2026-10-19

"""
import sys
from pathlib import Path

# Add alembic directory to path for helpers import
sys.path.insert(0, str(Path(__file__).parent.parent))

from alembic import op
from helpers import (
    create_enum_safe,
    create_table_safe,
    create_index_safe,
    drop_enum_safe,
    drop_table_safe,
)

# revision identifiers, used by Alembic.
revision = 'internhub_001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    create_enum_safe(op, 'role', ['ADMIN', 'USER'])
    create_enum_safe(op, 'internshipstatus', ['ACTIVE', 'COMPLETED', 'CANCELLED'])

    create_table_safe(op, 'users', """
        id VARCHAR(36) PRIMARY KEY,
        email VARCHAR(255) NOT NULL,
        name VARCHAR(255),
        hashed_password VARCHAR(255),
        role role NOT NULL DEFAULT 'USER',
        created_at TIMESTAMP NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMP DEFAULT NOW()
    """)
    create_index_safe(op, 'ix_users_email', 'users', ['email'], unique=True)

    create_table_safe(op, 'internships', """
        id VARCHAR(36) PRIMARY KEY,
        user_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        title VARCHAR(500) NOT NULL,
        role VARCHAR(255) NOT NULL,
        start_date TIMESTAMP NOT NULL,
        end_date TIMESTAMP NOT NULL,
        description TEXT,
        status internshipstatus NOT NULL DEFAULT 'ACTIVE',
        certificate_url TEXT,
        created_at TIMESTAMP NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMP NOT NULL DEFAULT NOW()
    """)
    create_index_safe(op, 'ix_internships_user_id', 'internships', ['user_id'])
    create_index_safe(op, 'ix_internships_created_at', 'internships', ['created_at'])

    create_table_safe(op, 'remarks', """
        id VARCHAR(36) PRIMARY KEY,
        internship_id VARCHAR(36) NOT NULL REFERENCES internships(id) ON DELETE CASCADE,
        user_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        message TEXT NOT NULL,
        request_type VARCHAR(50) NOT NULL DEFAULT 'GENERAL_REMARK',
        status VARCHAR(20) NOT NULL DEFAULT 'PENDING',
        admin_response TEXT,
        created_at TIMESTAMP NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMP NOT NULL DEFAULT NOW()
    """)
    create_index_safe(op, 'ix_remarks_internship_id', 'remarks', ['internship_id'])
    create_index_safe(op, 'ix_remarks_user_id', 'remarks', ['user_id'])
    create_index_safe(op, 'ix_remarks_created_at', 'remarks', ['created_at'])


def downgrade() -> None:
    drop_table_safe(op, 'remarks')
    drop_table_safe(op, 'internships')
    drop_table_safe(op, 'users')
    drop_enum_safe(op, 'internshipstatus')
    drop_enum_safe(op, 'role')
