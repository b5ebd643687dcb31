"""Modelo de asignaciones usuario-rol"""
from sqlalchemy import Column, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.utils import utc_now_naive


class UserRole(Base):
    """Asignación de un rol a un usuario, con su propio estado activo"""
    __tablename__ = "usuario_rol"
    __table_args__ = (
        UniqueConstraint("user_id", "role_id", name="uq_usuario_rol_par"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False, index=True)
    role_id = Column(Integer, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utc_now_naive, nullable=False)
    updated_at = Column(DateTime, default=utc_now_naive, onupdate=utc_now_naive, nullable=False)

    user = relationship("User", back_populates="role_assignments")
    role = relationship("Role", back_populates="user_assignments")

    @property
    def user_document_number(self):
        return self.user.document_number if self.user else None

    @property
    def user_full_name(self):
        return self.user.full_name if self.user else None

    @property
    def role_name(self):
        return self.role.name if self.role else None

    def __repr__(self):
        return f"<UserRole(id={self.id}, user_id={self.user_id}, role_id={self.role_id}, active={self.is_active})>"
