from __future__ import annotations
from sqlalchemy.orm import declarative_base, relationship, Mapped, mapped_column
from sqlalchemy import String, ForeignKey, UniqueConstraint, DateTime, text
from typing import Optional
import uuid

Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


# --- Core Models ---
class Permission(Base):
    __tablename__ = 'permissions'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    kind: Mapped[str] = mapped_column(String(16), nullable=False, default='MENU')
    parent_id: Mapped[Optional[str]] = mapped_column(ForeignKey('permissions.id', ondelete='SET NULL'), nullable=True)
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP'), server_onupdate=text('CURRENT_TIMESTAMP'))


class Role(Base):
    __tablename__ = 'roles'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default='ACTIVE')
    permissions = relationship('RolePermission', back_populates='role', cascade='all, delete-orphan')
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP'), server_onupdate=text('CURRENT_TIMESTAMP'))


class RolePermission(Base):
    __tablename__ = 'role_permissions'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    role_id: Mapped[str] = mapped_column(ForeignKey('roles.id', ondelete='CASCADE'), nullable=False, index=True)
    permission_id: Mapped[str] = mapped_column(ForeignKey('permissions.id', ondelete='CASCADE'), nullable=False)

    role = relationship('Role', back_populates='permissions')
    permission = relationship('Permission')

    __table_args__ = (UniqueConstraint('role_id', 'permission_id', name='uq_role_permission'),)


class Department(Base):
    __tablename__ = 'departments'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default='ACTIVE')
    canteens = relationship('DepartmentCanteen', back_populates='department', cascade='all, delete-orphan')
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP'), server_onupdate=text('CURRENT_TIMESTAMP'))


class DepartmentCanteen(Base):
    __tablename__ = 'department_canteens'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    department_id: Mapped[str] = mapped_column(ForeignKey('departments.id', ondelete='CASCADE'), nullable=False, index=True)
    canteen_id: Mapped[str] = mapped_column(ForeignKey('canteens.id', ondelete='CASCADE'), nullable=False)

    department = relationship('Department', back_populates='canteens')

    __table_args__ = (UniqueConstraint('department_id', 'canteen_id', name='uq_department_canteen'),)


class Staff(Base):
    """Staff profile keyed by the identity provider's principal id."""
    __tablename__ = 'staffs'
    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    username: Mapped[str] = mapped_column(String(64), nullable=False)
    display_name: Mapped[str] = mapped_column(String(128), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(128), unique=True, index=True)
    role_code: Mapped[str] = mapped_column(String(64), nullable=False, default='VIEWER')
    role_id: Mapped[Optional[str]] = mapped_column(ForeignKey('roles.id', ondelete='SET NULL'), nullable=True)
    department_id: Mapped[Optional[str]] = mapped_column(ForeignKey('departments.id', ondelete='SET NULL'), nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default='ACTIVE')
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP'))
