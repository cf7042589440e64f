"""users, groups, lessons

Revision ID: 0001
Revises:
Create Date: 2025-02-18

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(16), nullable=False, server_default='TEACHER'),
        sa.Column('is_active_flag', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table('groups',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('teacher_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('weekly_day', sa.Integer(), nullable=True),
        sa.Column('start_time', sa.String(8), nullable=True),
        sa.Column('duration_minutes', sa.Integer(), nullable=False, server_default='60'),
        sa.Column('timezone', sa.String(64), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('status', sa.String(16), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_groups_teacher_id', 'groups', ['teacher_id'])

    op.create_table('lessons',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('public_id', sa.String(32), nullable=True),
        sa.Column('group_id', sa.Integer(), sa.ForeignKey('groups.id', ondelete='CASCADE'), nullable=False),
        sa.Column('lesson_date', sa.Date(), nullable=False),
        sa.Column('start_datetime', sa.DateTime(), nullable=False),
        sa.Column('end_datetime', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(16), nullable=False, server_default='scheduled'),
        sa.Column('topic', sa.String(255), nullable=True),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('public_id', name='uq_lessons_public_id'),
        # страховка от параллельной генерации одной и той же группы
        sa.UniqueConstraint('group_id', 'lesson_date', name='uq_lessons_group_date'),
    )
    op.create_index('ix_lessons_group_id', 'lessons', ['group_id'])
    op.create_index('ix_lessons_lesson_date', 'lessons', ['lesson_date'])

def downgrade():
    op.drop_index('ix_lessons_lesson_date', table_name='lessons')
    op.drop_index('ix_lessons_group_id', table_name='lessons')
    op.drop_table('lessons')
    op.drop_index('ix_groups_teacher_id', table_name='groups')
    op.drop_table('groups')
    op.drop_index('ix_users_role', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
