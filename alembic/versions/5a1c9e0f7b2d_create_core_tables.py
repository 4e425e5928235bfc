"""create user, opportunity, application and message tables

Revision ID: 5a1c9e0f7b2d
Revises:
Create Date: 2026-10-19 10:12:40.512093

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision: str = '5a1c9e0f7b2d'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'user',
        sa.Column('id_user', sa.Integer(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('role', sa.Enum('VOLUNTEER', 'NGO', name='userrole'), nullable=False),
        sa.Column('skills', sa.JSON(), nullable=False),
        sa.Column('location', sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column('bio', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=False),
        sa.Column('organization_name', sqlmodel.sql.sqltypes.AutoString(length=200), nullable=True),
        sa.Column('organization_description', sqlmodel.sql.sqltypes.AutoString(length=2000), nullable=True),
        sa.Column('website_url', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.Column('hashed_password', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id_user')
    )
    op.create_index(op.f('ix_user_email'), 'user', ['email'], unique=True)
    op.create_index(op.f('ix_user_role'), 'user', ['role'], unique=False)

    op.create_table(
        'opportunity',
        sa.Column('id_opportunity', sa.Integer(), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(length=5000), nullable=False),
        sa.Column('required_skills', sa.JSON(), nullable=False),
        sa.Column('duration', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('location', sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column('status', sa.Enum('OPEN', 'CLOSED', name='opportunitystatus'), nullable=False),
        sa.Column('ngo_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['ngo_id'], ['user.id_user']),
        sa.PrimaryKeyConstraint('id_opportunity')
    )
    op.create_index(op.f('ix_opportunity_status'), 'opportunity', ['status'], unique=False)
    op.create_index(op.f('ix_opportunity_ngo_id'), 'opportunity', ['ngo_id'], unique=False)
    op.create_index(op.f('ix_opportunity_created_at'), 'opportunity', ['created_at'], unique=False)

    op.create_table(
        'application',
        sa.Column('id_application', sa.Integer(), nullable=False),
        sa.Column('cover_letter', sqlmodel.sql.sqltypes.AutoString(length=5000), nullable=False),
        sa.Column('opportunity_id', sa.Integer(), nullable=False),
        sa.Column('volunteer_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.Enum('PENDING', 'ACCEPTED', 'REJECTED', name='applicationstatus'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['opportunity_id'], ['opportunity.id_opportunity']),
        sa.ForeignKeyConstraint(['volunteer_id'], ['user.id_user']),
        sa.PrimaryKeyConstraint('id_application'),
        sa.UniqueConstraint('opportunity_id', 'volunteer_id', name='uq_application_opportunity_volunteer')
    )
    op.create_index(op.f('ix_application_opportunity_id'), 'application', ['opportunity_id'], unique=False)
    op.create_index(op.f('ix_application_volunteer_id'), 'application', ['volunteer_id'], unique=False)
    op.create_index(op.f('ix_application_status'), 'application', ['status'], unique=False)
    op.create_index(op.f('ix_application_created_at'), 'application', ['created_at'], unique=False)

    op.create_table(
        'message',
        sa.Column('id_message', sa.Integer(), nullable=False),
        sa.Column('content', sqlmodel.sql.sqltypes.AutoString(length=5000), nullable=False),
        sa.Column('sender_id', sa.Integer(), nullable=False),
        sa.Column('receiver_id', sa.Integer(), nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['receiver_id'], ['user.id_user']),
        sa.ForeignKeyConstraint(['sender_id'], ['user.id_user']),
        sa.PrimaryKeyConstraint('id_message')
    )
    op.create_index(op.f('ix_message_sender_id'), 'message', ['sender_id'], unique=False)
    op.create_index(op.f('ix_message_receiver_id'), 'message', ['receiver_id'], unique=False)
    op.create_index(op.f('ix_message_created_at'), 'message', ['created_at'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_message_created_at'), table_name='message')
    op.drop_index(op.f('ix_message_receiver_id'), table_name='message')
    op.drop_index(op.f('ix_message_sender_id'), table_name='message')
    op.drop_table('message')

    op.drop_index(op.f('ix_application_created_at'), table_name='application')
    op.drop_index(op.f('ix_application_status'), table_name='application')
    op.drop_index(op.f('ix_application_volunteer_id'), table_name='application')
    op.drop_index(op.f('ix_application_opportunity_id'), table_name='application')
    op.drop_table('application')

    op.drop_index(op.f('ix_opportunity_created_at'), table_name='opportunity')
    op.drop_index(op.f('ix_opportunity_ngo_id'), table_name='opportunity')
    op.drop_index(op.f('ix_opportunity_status'), table_name='opportunity')
    op.drop_table('opportunity')

    op.drop_index(op.f('ix_user_role'), table_name='user')
    op.drop_index(op.f('ix_user_email'), table_name='user')
    op.drop_table('user')

    sa.Enum(name='applicationstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='opportunitystatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='userrole').drop(op.get_bind(), checkfirst=True)
