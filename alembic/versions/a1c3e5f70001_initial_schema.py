"""Initial schema: schools, accounts, identifiers, academics, payments, subscriptions

Revision ID: a1c3e5f70001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = 'a1c3e5f70001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _base_columns():
    return [
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
    ]


def _base_indexes(table: str):
    op.create_index(op.f(f'ix_{table}_id'), table, ['id'], unique=False)
    op.create_index(op.f(f'ix_{table}_created_at'), table, ['created_at'], unique=False)
    op.create_index(op.f(f'ix_{table}_is_deleted'), table, ['is_deleted'], unique=False)


def _school_index(table: str):
    op.create_index(op.f(f'ix_{table}_school_id'), table, ['school_id'], unique=False)


def upgrade() -> None:
    op.create_table('schools',
        *_base_columns(),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('school_type', sa.String(length=30), nullable=True),
        sa.Column('slogan', sa.String(length=200), nullable=True),
        sa.Column('logo_url', sa.String(length=500), nullable=True),
        sa.Column('school_suffix', sa.String(length=50), nullable=False),
        sa.Column('academic_year', sa.String(length=9), nullable=False),
        sa.Column('semester_type', sa.String(length=10), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('language', sa.String(length=5), nullable=False),
        sa.Column('timezone', sa.String(length=50), nullable=False),
        sa.Column('student_matricule_format', sa.String(length=20), nullable=False),
        sa.Column('teacher_matricule_format', sa.String(length=20), nullable=False),
        sa.Column('parent_matricule_format', sa.String(length=20), nullable=False),
        sa.Column('default_student_password', sa.String(length=100), nullable=False),
        sa.Column('default_teacher_password', sa.String(length=100), nullable=False),
        sa.Column('default_parent_password', sa.String(length=100), nullable=False),
        sa.Column('auto_generate_student_matricule', sa.Boolean(), nullable=False),
        sa.Column('auto_generate_teacher_matricule', sa.Boolean(), nullable=False),
        sa.Column('auto_generate_parent_matricule', sa.Boolean(), nullable=False),
        sa.Column('subscription_status', sa.String(length=20), nullable=False),
        sa.Column('subscription_plan', sa.String(length=50), nullable=True),
        sa.Column('trial_end_date', sa.Date(), nullable=True),
        sa.Column('created_by', sa.Uuid(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    _base_indexes('schools')
    op.create_index(op.f('ix_schools_name'), 'schools', ['name'], unique=False)
    op.create_index(op.f('ix_schools_school_suffix'), 'schools', ['school_suffix'], unique=True)

    op.create_table('school_user_counters',
        *_base_columns(),
        sa.Column('school_id', sa.Uuid(), nullable=False),
        sa.Column('user_role', sa.String(length=20), nullable=False),
        sa.Column('current_count', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('school_id', 'user_role', name='uq_school_user_counter')
    )
    _base_indexes('school_user_counters')
    _school_index('school_user_counters')

    op.create_table('matricule_generation_log',
        *_base_columns(),
        sa.Column('school_id', sa.Uuid(), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('generated_matricule', sa.String(length=60), nullable=False),
        sa.Column('generated_email', sa.String(length=254), nullable=True),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        sa.Column('source', sa.String(length=30), nullable=False),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    _base_indexes('matricule_generation_log')
    _school_index('matricule_generation_log')
    op.create_index('idx_matricule_log_school_role', 'matricule_generation_log', ['school_id', 'role'], unique=False)

    op.create_table('auth_users',
        *_base_columns(),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('password_hash', sa.String(length=100), nullable=False),
        sa.Column('email_confirmed', sa.Boolean(), nullable=False),
        sa.Column('user_metadata', sa.JSON(), nullable=False),
        sa.Column('last_sign_in_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    _base_indexes('auth_users')
    op.create_index(op.f('ix_auth_users_email'), 'auth_users', ['email'], unique=True)

    op.create_table('profiles',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('school_id', sa.Uuid(), nullable=True),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('matricule', sa.String(length=60), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['id'], ['auth_users.id'], ),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    _base_indexes('profiles')
    _school_index('profiles')
    op.create_index(op.f('ix_profiles_email'), 'profiles', ['email'], unique=False)
    op.create_index(op.f('ix_profiles_matricule'), 'profiles', ['matricule'], unique=False)
    op.create_index('idx_profile_school_role', 'profiles', ['school_id', 'role'], unique=False)

    op.create_table('subscription_plans',
        *_base_columns(),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('period', sa.String(length=10), nullable=False),
        sa.Column('max_students', sa.Integer(), nullable=True),
        sa.Column('max_classes', sa.Integer(), nullable=True),
        sa.Column('features', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    _base_indexes('subscription_plans')
    op.create_index(op.f('ix_subscription_plans_code'), 'subscription_plans', ['code'], unique=True)

    op.create_table('subscriptions',
        *_base_columns(),
        sa.Column('school_id', sa.Uuid(), nullable=False),
        sa.Column('plan_id', sa.Uuid(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('gateway_reference', sa.String(length=100), nullable=True),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ),
        sa.ForeignKeyConstraint(['plan_id'], ['subscription_plans.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    _base_indexes('subscriptions')
    _school_index('subscriptions')
    op.create_index(op.f('ix_subscriptions_status'), 'subscriptions', ['status'], unique=False)
    op.create_index(op.f('ix_subscriptions_end_date'), 'subscriptions', ['end_date'], unique=False)
    op.create_index(op.f('ix_subscriptions_gateway_reference'), 'subscriptions', ['gateway_reference'], unique=False)

    op.create_table('payment_transactions',
        *_base_columns(),
        sa.Column('school_id', sa.Uuid(), nullable=False),
        sa.Column('subscription_id', sa.Uuid(), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('gateway_reference', sa.String(length=100), nullable=True),
        sa.Column('gateway_token', sa.String(length=200), nullable=True),
        sa.Column('gateway_response', sa.JSON(), nullable=True),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ),
        sa.ForeignKeyConstraint(['subscription_id'], ['subscriptions.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    _base_indexes('payment_transactions')
    _school_index('payment_transactions')
    op.create_index(op.f('ix_payment_transactions_subscription_id'), 'payment_transactions', ['subscription_id'], unique=False)
    op.create_index('idx_transaction_reference', 'payment_transactions', ['gateway_reference'], unique=False)

    op.create_table('audit_logs',
        *_base_columns(),
        sa.Column('category', sa.String(length=30), nullable=False),
        sa.Column('level', sa.String(length=10), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        sa.Column('school_id', sa.Uuid(), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    _base_indexes('audit_logs')
    _school_index('audit_logs')
    op.create_index(op.f('ix_audit_logs_category'), 'audit_logs', ['category'], unique=False)

    op.create_table('classes',
        *_base_columns(),
        sa.Column('school_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('level', sa.String(length=30), nullable=False),
        sa.Column('section', sa.String(length=10), nullable=True),
        sa.Column('capacity', sa.Integer(), nullable=True),
        sa.Column('academic_year', sa.String(length=9), nullable=False),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('school_id', 'name', 'academic_year', name='uq_class_identity')
    )
    _base_indexes('classes')
    _school_index('classes')
    op.create_index(op.f('ix_classes_name'), 'classes', ['name'], unique=False)

    op.create_table('students',
        *_base_columns(),
        sa.Column('school_id', sa.Uuid(), nullable=False),
        sa.Column('class_id', sa.Uuid(), nullable=True),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        sa.Column('student_number', sa.String(length=60), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('place_of_birth', sa.String(length=100), nullable=True),
        sa.Column('gender', sa.String(length=10), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('parent_first_name', sa.String(length=100), nullable=True),
        sa.Column('parent_last_name', sa.String(length=100), nullable=True),
        sa.Column('parent_phone', sa.String(length=20), nullable=True),
        sa.Column('parent_email', sa.String(length=254), nullable=True),
        sa.Column('parent_matricule', sa.String(length=60), nullable=True),
        sa.Column('enrollment_date', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ),
        sa.ForeignKeyConstraint(['class_id'], ['classes.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['auth_users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('school_id', 'student_number', name='uq_student_number')
    )
    _base_indexes('students')
    _school_index('students')
    op.create_index(op.f('ix_students_class_id'), 'students', ['class_id'], unique=False)
    op.create_index(op.f('ix_students_user_id'), 'students', ['user_id'], unique=False)
    op.create_index('idx_student_school_class', 'students', ['school_id', 'class_id'], unique=False)

    op.create_table('teachers',
        *_base_columns(),
        sa.Column('school_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        sa.Column('employee_number', sa.String(length=60), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('specialization', sa.String(length=100), nullable=True),
        sa.Column('hire_date', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['auth_users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('school_id', 'employee_number', name='uq_teacher_employee_number')
    )
    _base_indexes('teachers')
    _school_index('teachers')
    op.create_index(op.f('ix_teachers_user_id'), 'teachers', ['user_id'], unique=False)

    op.create_table('subjects',
        *_base_columns(),
        sa.Column('school_id', sa.Uuid(), nullable=False),
        sa.Column('class_id', sa.Uuid(), nullable=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('abbreviation', sa.String(length=10), nullable=True),
        sa.Column('code', sa.String(length=20), nullable=True),
        sa.Column('coefficient', sa.Numeric(precision=4, scale=2), nullable=False),
        sa.Column('max_score', sa.Integer(), nullable=False),
        sa.Column('hours_per_week', sa.Integer(), nullable=True),
        sa.Column('color', sa.String(length=7), nullable=True),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ),
        sa.ForeignKeyConstraint(['class_id'], ['classes.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    _base_indexes('subjects')
    _school_index('subjects')
    op.create_index(op.f('ix_subjects_class_id'), 'subjects', ['class_id'], unique=False)

    op.create_table('exams',
        *_base_columns(),
        sa.Column('school_id', sa.Uuid(), nullable=False),
        sa.Column('class_id', sa.Uuid(), nullable=False),
        sa.Column('subject_id', sa.Uuid(), nullable=True),
        sa.Column('teacher_id', sa.Uuid(), nullable=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('exam_date', sa.Date(), nullable=False),
        sa.Column('semester', sa.String(length=20), nullable=True),
        sa.Column('total_points', sa.Integer(), nullable=False),
        sa.Column('is_published', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ),
        sa.ForeignKeyConstraint(['class_id'], ['classes.id'], ),
        sa.ForeignKeyConstraint(['subject_id'], ['subjects.id'], ),
        sa.ForeignKeyConstraint(['teacher_id'], ['teachers.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    _base_indexes('exams')
    _school_index('exams')
    op.create_index('idx_exam_class_date', 'exams', ['class_id', 'exam_date'], unique=False)

    op.create_table('grades',
        *_base_columns(),
        sa.Column('school_id', sa.Uuid(), nullable=False),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('subject_id', sa.Uuid(), nullable=False),
        sa.Column('exam_id', sa.Uuid(), nullable=True),
        sa.Column('exam_type', sa.String(length=20), nullable=False),
        sa.Column('semester', sa.String(length=20), nullable=True),
        sa.Column('grade_value', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('max_grade', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('coefficient', sa.Numeric(precision=4, scale=2), nullable=True),
        sa.Column('created_by', sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ),
        sa.ForeignKeyConstraint(['subject_id'], ['subjects.id'], ),
        sa.ForeignKeyConstraint(['exam_id'], ['exams.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    _base_indexes('grades')
    _school_index('grades')
    op.create_index(op.f('ix_grades_student_id'), 'grades', ['student_id'], unique=False)
    op.create_index('idx_grade_student_subject', 'grades', ['student_id', 'subject_id'], unique=False)
    op.create_index('idx_grade_exam', 'grades', ['exam_id'], unique=False)

    op.create_table('announcements',
        *_base_columns(),
        sa.Column('school_id', sa.Uuid(), nullable=False),
        sa.Column('author_id', sa.Uuid(), nullable=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('priority', sa.String(length=10), nullable=False),
        sa.Column('target_audience', sa.JSON(), nullable=False),
        sa.Column('is_urgent', sa.Boolean(), nullable=False),
        sa.Column('is_published', sa.Boolean(), nullable=False),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    _base_indexes('announcements')
    _school_index('announcements')

    op.create_table('payment_categories',
        *_base_columns(),
        sa.Column('school_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('is_recurring', sa.Boolean(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    _base_indexes('payment_categories')
    _school_index('payment_categories')

    op.create_table('payments',
        *_base_columns(),
        sa.Column('school_id', sa.Uuid(), nullable=False),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('payment_type', sa.String(length=50), nullable=False),
        sa.Column('payment_method', sa.String(length=20), nullable=False),
        sa.Column('payment_month', sa.String(length=20), nullable=True),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('paid_by', sa.String(length=200), nullable=True),
        sa.Column('phone_number', sa.String(length=20), nullable=True),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    _base_indexes('payments')
    _school_index('payments')
    op.create_index(op.f('ix_payments_student_id'), 'payments', ['student_id'], unique=False)
    op.create_index('idx_payment_student_date', 'payments', ['student_id', 'payment_date'], unique=False)

    op.create_table('schedules',
        *_base_columns(),
        sa.Column('school_id', sa.Uuid(), nullable=False),
        sa.Column('class_id', sa.Uuid(), nullable=False),
        sa.Column('subject_id', sa.Uuid(), nullable=True),
        sa.Column('teacher_id', sa.Uuid(), nullable=True),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('room', sa.String(length=50), nullable=True),
        sa.Column('activity_name', sa.String(length=100), nullable=True),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ),
        sa.ForeignKeyConstraint(['class_id'], ['classes.id'], ),
        sa.ForeignKeyConstraint(['subject_id'], ['subjects.id'], ),
        sa.ForeignKeyConstraint(['teacher_id'], ['teachers.id'], ),
        sa.CheckConstraint('day_of_week BETWEEN 1 AND 7', name='ck_schedule_day_of_week'),
        sa.PrimaryKeyConstraint('id')
    )
    _base_indexes('schedules')
    _school_index('schedules')
    op.create_index('idx_schedule_class_day', 'schedules', ['class_id', 'day_of_week'], unique=False)

    op.create_table('lesson_logs',
        *_base_columns(),
        sa.Column('school_id', sa.Uuid(), nullable=False),
        sa.Column('class_id', sa.Uuid(), nullable=False),
        sa.Column('subject_id', sa.Uuid(), nullable=False),
        sa.Column('teacher_id', sa.Uuid(), nullable=True),
        sa.Column('lesson_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=True),
        sa.Column('end_time', sa.Time(), nullable=True),
        sa.Column('topic', sa.String(length=200), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('homework', sa.Text(), nullable=True),
        sa.Column('resources', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ),
        sa.ForeignKeyConstraint(['class_id'], ['classes.id'], ),
        sa.ForeignKeyConstraint(['subject_id'], ['subjects.id'], ),
        sa.ForeignKeyConstraint(['teacher_id'], ['teachers.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    _base_indexes('lesson_logs')
    _school_index('lesson_logs')
    op.create_index('idx_lesson_log_class_date', 'lesson_logs', ['class_id', 'lesson_date'], unique=False)


def downgrade() -> None:
    for table in (
        'lesson_logs', 'schedules', 'payments', 'payment_categories', 'announcements',
        'grades', 'exams', 'subjects', 'teachers', 'students', 'classes', 'audit_logs',
        'payment_transactions', 'subscriptions', 'subscription_plans', 'profiles',
        'auth_users', 'matricule_generation_log', 'school_user_counters', 'schools',
    ):
        op.drop_table(table)
