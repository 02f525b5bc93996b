"""create learning platform tables

Revision ID: 3f2b7c91d0a4
Revises:
Create Date: 2026-10-19 09:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f2b7c91d0a4'
down_revision = None
branch_labels = None
depends_on = None

progress_status = sa.Enum('NOT_STARTED', 'IN_PROGRESS', 'COMPLETED', name='progressstatus')
badge_type = sa.Enum('MODULE_COMPLETION', 'QUIZ_PASS', 'COURSE_COMPLETION', 'STREAK', name='badgetype')


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=201), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='student'),
        sa.Column('date_created', sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp())
    )

    op.create_table(
        'learning_modules',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('slug', sa.String(length=100), nullable=False, unique=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('objectives', sa.JSON(), nullable=True),
        sa.Column('topics', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp())
    )

    op.create_table(
        'module_progress',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('module_id', sa.Integer(), sa.ForeignKey('learning_modules.id'), nullable=False),
        sa.Column('status', progress_status, nullable=False),
        sa.Column('score', sa.Float(), nullable=False),
        sa.Column('time_spent', sa.Integer(), nullable=False),
        sa.Column('last_accessed', sa.DateTime(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('user_id', 'module_id', name='unique_user_module')
    )

    op.create_table(
        'badges',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('image_url', sa.String(length=255), nullable=True),
        sa.Column('badge_type', badge_type, nullable=False),
        sa.Column('requirements', sa.Text(), nullable=True),
        sa.Column('points', sa.Integer(), nullable=False),
        sa.Column('module_id', sa.Integer(), sa.ForeignKey('learning_modules.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False)
    )

    op.create_table(
        'user_badges',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('badge_id', sa.Integer(), sa.ForeignKey('badges.id'), nullable=False),
        sa.Column('earned_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('user_id', 'badge_id', name='unique_user_badge')
    )

    op.create_table(
        'contact_submissions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('subject', sa.String(length=200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('category', sa.String(length=50), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False)
    )

    op.create_table(
        'problem_attempts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('problem_id', sa.String(length=100), nullable=False, index=True),
        sa.Column('module_slug', sa.String(length=100), nullable=False, index=True),
        sa.Column('is_correct', sa.Boolean(), nullable=False),
        sa.Column('attempt_number', sa.Integer(), nullable=False),
        sa.Column('hints_used_count', sa.Integer(), nullable=False),
        sa.Column('time_spent', sa.Integer(), nullable=True),
        sa.Column('answer', sa.Text(), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=False)
    )

    op.create_table(
        'hint_usages',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('problem_id', sa.String(length=100), nullable=False, index=True),
        sa.Column('module_slug', sa.String(length=100), nullable=False, index=True),
        sa.Column('hint_index', sa.Integer(), nullable=False),
        sa.Column('solved_after', sa.Boolean(), nullable=False),
        sa.Column('time_to_solve', sa.Integer(), nullable=True),
        sa.Column('was_helpful', sa.Boolean(), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=False)
    )

    op.create_table(
        'problem_difficulty_metrics',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('problem_id', sa.String(length=100), nullable=False, unique=True),
        sa.Column('module_slug', sa.String(length=100), nullable=False, index=True),
        sa.Column('total_attempts', sa.Integer(), nullable=False),
        sa.Column('total_completions', sa.Integer(), nullable=False),
        sa.Column('avg_attempts', sa.Float(), nullable=False),
        sa.Column('avg_time_to_solve', sa.Integer(), nullable=False),
        sa.Column('avg_hints_used', sa.Float(), nullable=False),
        sa.Column('success_rate', sa.Float(), nullable=False),
        sa.Column('calculated_diff', sa.String(length=20), nullable=False),
        sa.Column('sample_size', sa.Integer(), nullable=False),
        sa.Column('last_calculated', sa.DateTime(), nullable=False)
    )


def downgrade():
    op.drop_table('problem_difficulty_metrics')
    op.drop_table('hint_usages')
    op.drop_table('problem_attempts')
    op.drop_table('contact_submissions')
    op.drop_table('user_badges')
    op.drop_table('badges')
    op.drop_table('module_progress')
    op.drop_table('learning_modules')
    op.drop_table('users')
    badge_type.drop(op.get_bind(), checkfirst=True)
    progress_status.drop(op.get_bind(), checkfirst=True)
