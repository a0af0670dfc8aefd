"""initial schema

Revision ID: 0001_initial
Revises: 
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('airports',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(length=4), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('city', sa.String(length=120), nullable=False),
        sa.Column('country', sa.String(length=120), nullable=False),
    )
    op.create_index('ix_airports_code', 'airports', ['code'], unique=True)
    op.create_index('ix_airports_city', 'airports', ['city'])
    op.create_index('ix_airports_country', 'airports', ['country'])

    op.create_table('flight_owners',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_name', sa.String(length=255), nullable=False),
        sa.Column('company_code', sa.String(length=5), nullable=False),
        sa.Column('contact_info', sa.String(length=255), nullable=True),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_flight_owners_company_code', 'flight_owners', ['company_code'], unique=True)

    op.create_table('users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table('admins',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_admins_username', 'admins', ['username'], unique=True)

    op.create_table('flights',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('flight_owners.id'), nullable=False),
        sa.Column('flight_code', sa.String(length=32), nullable=False),
        sa.Column('flight_name', sa.String(length=120), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('departure_airport_id', sa.Integer(), sa.ForeignKey('airports.id'), nullable=False),
        sa.Column('destination_airport_id', sa.Integer(), sa.ForeignKey('airports.id'), nullable=False),
        sa.Column('departure_time', sa.DateTime(), nullable=False),
        sa.Column('arrival_time', sa.DateTime(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.UniqueConstraint('company_id', 'flight_code', name='uq_flight_company_code'),
    )
    op.create_index('ix_flights_company_id', 'flights', ['company_id'])
    op.create_index('ix_flights_flight_code', 'flights', ['flight_code'])
    op.create_index('ix_flights_departure_airport_id', 'flights', ['departure_airport_id'])
    op.create_index('ix_flights_destination_airport_id', 'flights', ['destination_airport_id'])
    op.create_index('ix_flights_departure_time', 'flights', ['departure_time'])

    op.create_table('bookings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('pnr', sa.String(length=12), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('flight_id', sa.Integer(), sa.ForeignKey('flights.id', ondelete='SET NULL'), nullable=True),
        sa.Column('departure_airport_id', sa.Integer(), sa.ForeignKey('airports.id'), nullable=False),
        sa.Column('destination_airport_id', sa.Integer(), sa.ForeignKey('airports.id'), nullable=False),
        sa.Column('departure_time', sa.DateTime(), nullable=False),
        sa.Column('arrival_time', sa.DateTime(), nullable=False),
        sa.Column('date_of_departure', sa.Date(), nullable=False),
        sa.Column('date_of_arrival', sa.Date(), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('payment_status', sa.String(length=20), nullable=False, server_default='Pending'),
        sa.Column('booking_status', sa.String(length=20), nullable=False, server_default='Pending'),
        sa.Column('booked_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_bookings_pnr', 'bookings', ['pnr'], unique=True)
    op.create_index('ix_bookings_user_id', 'bookings', ['user_id'])
    op.create_index('ix_bookings_flight_id', 'bookings', ['flight_id'])
    op.create_index('ix_bookings_booking_status', 'bookings', ['booking_status'])

def downgrade():
    op.drop_table('bookings')
    op.drop_table('flights')
    op.drop_table('admins')
    op.drop_table('users')
    op.drop_table('flight_owners')
    op.drop_table('airports')
