"""Modelo de roles"""
import json
from typing import List

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.utils import utc_now_naive


class Role(Base):
    """Rol asignable a usuarios, con sus permisos en un arreglo JSON"""
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False, index=True, comment="Mayúsculas y guion bajo")
    description = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    permissions = Column(Text, nullable=True, comment="Arreglo JSON de permisos")
    created_at = Column(DateTime, default=utc_now_naive, nullable=False)
    updated_at = Column(DateTime, default=utc_now_naive, onupdate=utc_now_naive, nullable=False)

    user_assignments = relationship("UserRole", back_populates="role")

    @property
    def permission_list(self) -> List[str]:
        if not self.permissions:
            return []
        try:
            value = json.loads(self.permissions)
        except ValueError:
            return []
        return [str(p) for p in value] if isinstance(value, list) else []

    def set_permissions(self, permissions: List[str]) -> None:
        self.permissions = json.dumps(list(permissions))

    def has_permission(self, permission: str) -> bool:
        """
        Verifica si el permiso está en la lista decodificada

        La búsqueda por contenido del JSON queda solo en la consulta
        de roles por permiso del repositorio.
        """
        return permission.strip().upper() in self.permission_list

    def __repr__(self):
        return f"<Role(id={self.id}, name='{self.name}', active={self.is_active})>"
