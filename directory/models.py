"""
Database models for the user directory tables.
"""
from sqlalchemy import Column, ForeignKey, Integer, String

from directory.database import Base


class Province(Base):
    """
    Read-only province lookup table.
    """

    __tablename__ = "tb_province"

    province_id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)


class User(Base):
    """
    A directory entry. ``province_id`` is nullable: no province assigned.
    """

    __tablename__ = "tb_user"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    firstname = Column(String(100), nullable=False)
    lastname = Column(String(100), nullable=False)
    province_id = Column(Integer, ForeignKey("tb_province.province_id"), nullable=True, index=True)
