from alembic import op
import sqlalchemy as sa

revision = '0001_init_core'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        'halaqah',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False, unique=True),
        sa.Column('teacher_id', sa.Uuid(), nullable=True),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_halaqah_name', 'halaqah', ['name'])
    op.create_index('ix_halaqah_teacher_id', 'halaqah', ['teacher_id'])

    op.create_table(
        'students',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('halaqah', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='Mutawassith'),
        sa.Column('average_score', sa.Float(), nullable=False, server_default='0'),
        sa.Column('avatar_url', sa.String(), nullable=True),
        sa.Column('wali_name', sa.String(), nullable=True),
        sa.Column('wali_phone', sa.String(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_students_halaqah', 'students', ['halaqah'])
    op.create_index('ix_students_wali_phone', 'students', ['wali_phone'])

    op.create_table(
        'curriculum_items',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('target_ayat', sa.Integer(), nullable=True),
        sa.Column('surah_number', sa.Integer(), nullable=True),
        sa.Column('ayat_start', sa.Integer(), nullable=True),
        sa.Column('ayat_end', sa.Integer(), nullable=True),
        sa.Column('page_start', sa.Integer(), nullable=True),
        sa.Column('page_end', sa.Integer(), nullable=True),
        sa.Column('total_pages', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        'daily_scores',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('student_id', sa.Uuid(), sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False),
        sa.Column('ustadz_id', sa.String(), nullable=False),
        sa.Column('curriculum_id', sa.Uuid(), sa.ForeignKey('curriculum_items.id'), nullable=True),
        sa.Column('adab', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('disiplin', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('setoran', sa.Integer(), nullable=False),
        sa.Column('err_diberitahu', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('err_harokat', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('err_lupa', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('err_berhenti', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('progress', sa.Integer(), nullable=True),
        sa.Column('progress_unit', sa.String(), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('hafalan_type', sa.String(), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_daily_scores_student_id', 'daily_scores', ['student_id'])

    op.create_table(
        'criteria_ref',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('aspect', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
    )

    op.create_table(
        'sessions_ref',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('time_start', sa.Time(), nullable=True),
        sa.Column('time_end', sa.Time(), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
    )

    op.create_table(
        'daily_assessments',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('student_id', sa.Uuid(), sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False),
        sa.Column('session_id', sa.Integer(), sa.ForeignKey('sessions_ref.id'), nullable=False),
        sa.Column('criteria_id', sa.Integer(), sa.ForeignKey('criteria_ref.id'), nullable=False),
        sa.Column('is_compliant', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('absence_reason', sa.String(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('date', 'student_id', 'session_id', 'criteria_id', name='uq_daily_assessment'),
    )
    op.create_index('ix_daily_assessments_date', 'daily_assessments', ['date'])
    op.create_index('ix_daily_assessments_student_id', 'daily_assessments', ['student_id'])

    op.create_table(
        'announcements',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now()),
    )

def downgrade():
    op.drop_table('announcements')
    op.drop_index('ix_daily_assessments_student_id', table_name='daily_assessments')
    op.drop_index('ix_daily_assessments_date', table_name='daily_assessments')
    op.drop_table('daily_assessments')
    op.drop_table('sessions_ref')
    op.drop_table('criteria_ref')
    op.drop_index('ix_daily_scores_student_id', table_name='daily_scores')
    op.drop_table('daily_scores')
    op.drop_table('curriculum_items')
    op.drop_index('ix_students_wali_phone', table_name='students')
    op.drop_index('ix_students_halaqah', table_name='students')
    op.drop_table('students')
    op.drop_index('ix_halaqah_teacher_id', table_name='halaqah')
    op.drop_index('ix_halaqah_name', table_name='halaqah')
    op.drop_table('halaqah')
