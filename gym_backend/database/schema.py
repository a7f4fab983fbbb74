"""
Table definitions (DDL only; queries are written as SQL text)
"""
from sqlalchemy import (
    Column, Date, DateTime, Float, ForeignKey, Index, Integer, MetaData, String, Table, Text,
)
from sqlalchemy.ext.asyncio import AsyncEngine

metadata = MetaData()

clients = Table(
    "clients",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("gym_id", Integer, nullable=False),
    Column("first_name", String(120), nullable=False),
    Column("last_name", String(120)),
    Column("phone", String(40)),
    Column("email", String(254)),
    Column("status", String(16), nullable=False, default="ACTIVO"),
    Column("registered_on", Date, nullable=False),
    Column("membership_started_on", Date),
    Column("membership_expires_on", Date),
    Column("notes", Text),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    Index("idx_clients_gym_id", "gym_id"),
    Index("idx_clients_membership_expires_on", "membership_expires_on"),
)

measurements = Table(
    "measurements",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("gym_id", Integer, nullable=False),
    Column("client_id", Integer, ForeignKey("clients.id"), nullable=False),
    Column("measured_on", Date, nullable=False),
    Column("weight", Float, nullable=False),
    Column("height", Float, nullable=False),
    Column("chest_cm", Float, nullable=False),
    Column("waist_cm", Float, nullable=False),
    Column("hip_cm", Float, nullable=False),
    Column("left_arm_cm", Float, nullable=False),
    Column("right_arm_cm", Float, nullable=False),
    Column("left_leg_cm", Float, nullable=False),
    Column("right_leg_cm", Float, nullable=False),
    Column("body_fat_pct", Float),
    Column("notes", Text),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    Index("idx_measurements_gym_id", "gym_id"),
    Index("idx_measurements_client_id", "client_id"),
    Index("idx_measurements_measured_on", "measured_on"),
)


async def create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
