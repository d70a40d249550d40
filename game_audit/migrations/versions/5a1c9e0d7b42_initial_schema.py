"""initial schema

Revision ID: 5a1c9e0d7b42
Revises:
Create Date: 2024-05-02 09:30:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5a1c9e0d7b42'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'locations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(length=20), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('state', sa.String(length=100), nullable=True),
        sa.Column('country', sa.String(length=100), nullable=True),
        sa.Column('contact_person', sa.String(length=150), nullable=True),
        sa.Column('contact_phone', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code'),
    )
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=False),
        sa.Column('password_hash', sa.String(length=128), nullable=False),
        sa.Column('role', sa.String(length=32), nullable=False),
        sa.Column('location_id', sa.Integer(), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('department', sa.String(length=100), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['location_id'], ['locations.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_table(
        'vendors',
        sa.Column('vendor_id', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('contact_person', sa.String(length=150), nullable=True),
        sa.Column('phone', sa.String(length=12), nullable=True),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='Active'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('vendor_id'),
    )
    op.create_table(
        'machines',
        sa.Column('machine_id', sa.String(length=50), nullable=False),
        sa.Column('machine_name', sa.String(length=150), nullable=False),
        sa.Column('vendor_id', sa.String(length=50), nullable=True),
        sa.Column('vendor_name', sa.String(length=150), nullable=True),
        sa.Column('location_id', sa.Integer(), nullable=True),
        sa.Column('health_status', sa.String(length=20), nullable=False, server_default='Good'),
        sa.Column('last_service_date', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['location_id'], ['locations.id']),
        sa.ForeignKeyConstraint(['vendor_id'], ['vendors.vendor_id']),
        sa.PrimaryKeyConstraint('machine_id'),
    )
    op.create_table(
        'audit_entries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('machine_no', sa.String(length=50), nullable=False),
        sa.Column('entry_date', sa.Date(), nullable=False),
        sa.Column('prev_in', sa.Float(), nullable=False, server_default='0'),
        sa.Column('prev_out', sa.Float(), nullable=False, server_default='0'),
        sa.Column('cur_in', sa.Float(), nullable=False, server_default='0'),
        sa.Column('cur_out', sa.Float(), nullable=False, server_default='0'),
        sa.Column('jackpot', sa.Float(), nullable=False, server_default='0'),
        sa.Column('location_id', sa.Integer(), nullable=True),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['location_id'], ['locations.id']),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_audit_entries_machine_no', 'audit_entries', ['machine_no'])
    op.create_index('ix_audit_entries_entry_date', 'audit_entries', ['entry_date'])
    op.create_table(
        'msp_entries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('entry_date', sa.Date(), nullable=False),
        sa.Column('location_id', sa.Integer(), nullable=True),
        sa.Column('machine_no', sa.String(length=50), nullable=False),
        sa.Column('entry_type', sa.String(length=10), nullable=False, server_default='MSP'),
        sa.Column('amount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('remarks', sa.String(length=255), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['location_id'], ['locations.id']),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_msp_entries_entry_date', 'msp_entries', ['entry_date'])
    op.create_table(
        'agent_silver_slips',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('slip_no', sa.String(length=32), nullable=False),
        sa.Column('slip_category', sa.String(length=10), nullable=False, server_default='regular'),
        sa.Column('slip_date', sa.Date(), nullable=False),
        sa.Column('serial', sa.Integer(), nullable=False),
        sa.Column('agent_id', sa.Integer(), nullable=True),
        sa.Column('agent_name', sa.String(length=150), nullable=True),
        sa.Column('machine_no', sa.String(length=50), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('bonus_type', sa.String(length=50), nullable=True),
        sa.Column('bonus_amount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('location_id', sa.Integer(), nullable=True),
        sa.Column('is_paid', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('confirmed_by', sa.String(length=50), nullable=True),
        sa.Column('paid_by', sa.String(length=150), nullable=True),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['agent_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['location_id'], ['locations.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slip_no'),
    )
    op.create_index('ix_agent_silver_slips_slip_date', 'agent_silver_slips', ['slip_date'])
    op.create_table(
        'silver_entries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('slip_no', sa.String(length=32), nullable=False),
        sa.Column('slip_date', sa.Date(), nullable=True),
        sa.Column('agent_name', sa.String(length=150), nullable=True),
        sa.Column('machine_no', sa.String(length=50), nullable=True),
        sa.Column('amount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('location_id', sa.Integer(), nullable=True),
        sa.Column('confirmed_by', sa.String(length=50), nullable=True),
        sa.Column('paid_by', sa.String(length=150), nullable=True),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['location_id'], ['locations.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slip_no'),
    )
    op.create_table(
        'silver_purchases',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('purchase_id', sa.String(length=40), nullable=False),
        sa.Column('date_time', sa.DateTime(), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='Pending'),
        sa.Column('entered_by', sa.String(length=32), nullable=False),
        sa.Column('entered_by_user_id', sa.Integer(), nullable=True),
        sa.Column('approved_by', sa.String(length=32), nullable=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('location_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['entered_by_user_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['location_id'], ['locations.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('purchase_id'),
    )
    op.create_table(
        'delete_requests',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('user_name', sa.String(length=150), nullable=True),
        sa.Column('user_email', sa.String(length=120), nullable=True),
        sa.Column('location_id', sa.Integer(), nullable=True),
        sa.Column('requested_by', sa.String(length=150), nullable=True),
        sa.Column('requested_by_role', sa.String(length=32), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('requested_at', sa.DateTime(), nullable=True),
        sa.Column('decided_by', sa.String(length=150), nullable=True),
        sa.Column('decided_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['location_id'], ['locations.id']),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade():
    op.drop_table('delete_requests')
    op.drop_table('silver_purchases')
    op.drop_table('silver_entries')
    op.drop_index('ix_agent_silver_slips_slip_date', table_name='agent_silver_slips')
    op.drop_table('agent_silver_slips')
    op.drop_index('ix_msp_entries_entry_date', table_name='msp_entries')
    op.drop_table('msp_entries')
    op.drop_index('ix_audit_entries_entry_date', table_name='audit_entries')
    op.drop_index('ix_audit_entries_machine_no', table_name='audit_entries')
    op.drop_table('audit_entries')
    op.drop_table('machines')
    op.drop_table('vendors')
    op.drop_table('users')
    op.drop_table('locations')
