"""
Excepciones de dominio
Conjunto Residencial Arkania

Jerarquía de excepciones que lanzan los servicios. Cada categoría tiene un
código HTTP asociado y los handlers registrados en `app.main` la traducen
a la respuesta correspondiente:

- NotFoundException -> 404
- AlreadyExistsException -> 409
- InvalidOperationException -> 400
"""
from fastapi import status


class AppException(Exception):
    """Excepción base de la aplicación"""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Error en la operación"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_message
        super().__init__(self.detail)


# =============================================================================
# CATEGORÍAS
# =============================================================================

class NotFoundException(AppException):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Recurso no encontrado"


class AlreadyExistsException(AppException):
    status_code = status.HTTP_409_CONFLICT
    default_message = "El recurso ya existe"


class InvalidOperationException(AppException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Operación inválida"


# =============================================================================
# USUARIOS
# =============================================================================

class UserNotFoundException(NotFoundException):
    default_message = "Usuario no encontrado"

    @classmethod
    def by_id(cls, user_id: int) -> "UserNotFoundException":
        return cls(f"Usuario con ID {user_id} no encontrado")

    @classmethod
    def by_document(cls, document_number: str) -> "UserNotFoundException":
        return cls(f"Usuario con número de documento {document_number} no encontrado")

    @classmethod
    def by_email(cls, email: str) -> "UserNotFoundException":
        return cls(f"Usuario con email {email} no encontrado")


class UserAlreadyExistsException(AlreadyExistsException):
    default_message = "El usuario ya existe en el sistema"

    @classmethod
    def by_document(cls, document_number: str) -> "UserAlreadyExistsException":
        return cls(f"Ya existe un usuario con el número de documento {document_number}")

    @classmethod
    def by_email(cls, email: str) -> "UserAlreadyExistsException":
        return cls(f"Ya existe un usuario con el email {email}")


class UserInvalidOperationException(InvalidOperationException):
    default_message = "Operación inválida sobre el usuario"

    @classmethod
    def last_admin(cls, user_id: int) -> "UserInvalidOperationException":
        return cls(f"No se puede eliminar el usuario {user_id}: es el último administrador activo")

    @classmethod
    def wrong_password(cls) -> "UserInvalidOperationException":
        return cls("La contraseña actual es incorrecta")

    @classmethod
    def invalid_date_range(cls) -> "UserInvalidOperationException":
        return cls("La fecha de inicio debe ser anterior a la fecha de fin")


# =============================================================================
# ROLES
# =============================================================================

class RoleNotFoundException(NotFoundException):
    default_message = "Rol no encontrado"

    @classmethod
    def by_id(cls, role_id: int) -> "RoleNotFoundException":
        return cls(f"Rol con ID {role_id} no encontrado")

    @classmethod
    def by_name(cls, name: str) -> "RoleNotFoundException":
        return cls(f"Rol con nombre '{name}' no encontrado")

    @classmethod
    def missing_permission(cls, name: str, permission: str) -> "RoleNotFoundException":
        return cls(f"El rol '{name}' no tiene el permiso '{permission}'")


class RoleAlreadyExistsException(AlreadyExistsException):
    default_message = "El rol ya existe en el sistema"

    @classmethod
    def by_name(cls, name: str) -> "RoleAlreadyExistsException":
        return cls(f"Ya existe un rol con el nombre '{name}'")

    @classmethod
    def permission(cls, name: str, permission: str) -> "RoleAlreadyExistsException":
        return cls(f"El rol '{name}' ya tiene el permiso '{permission}'")


class RoleInvalidOperationException(InvalidOperationException):
    default_message = "Operación inválida sobre el rol"

    @classmethod
    def has_users(cls, name: str, user_count: int) -> "RoleInvalidOperationException":
        return cls(
            f"No se puede eliminar el rol '{name}'. Tiene {user_count} usuario(s) asignado(s)"
        )

    @classmethod
    def critical_role(cls, name: str) -> "RoleInvalidOperationException":
        return cls(f"No se puede desactivar el rol '{name}' porque es crítico para el sistema")

    @classmethod
    def critical_rename(cls, name: str) -> "RoleInvalidOperationException":
        return cls(f"No se puede renombrar el rol '{name}' porque es crítico para el sistema")

    @classmethod
    def invalid_permissions(cls, permissions) -> "RoleInvalidOperationException":
        return cls(f"Permisos inválidos: {', '.join(sorted(permissions))}")


# =============================================================================
# ASIGNACIONES USUARIO-ROL
# =============================================================================

class UserRoleNotFoundException(NotFoundException):
    default_message = "Asignación de rol no encontrada"

    @classmethod
    def by_id(cls, assignment_id: int) -> "UserRoleNotFoundException":
        return cls(f"Asignación con ID {assignment_id} no encontrada")

    @classmethod
    def by_pair(cls, user_id: int, role_id: int) -> "UserRoleNotFoundException":
        return cls(f"No existe asignación del rol {role_id} al usuario {user_id}")


class UserRoleAlreadyExistsException(AlreadyExistsException):
    default_message = "La asignación de rol ya existe"

    @classmethod
    def active_pair(cls, user_id: int, role_id: int) -> "UserRoleAlreadyExistsException":
        return cls(f"El usuario {user_id} ya tiene asignado el rol {role_id} de forma activa")


class UserRoleInvalidOperationException(InvalidOperationException):
    default_message = "Operación inválida sobre la asignación de rol"

    @classmethod
    def inactive_user(cls, user_id: int) -> "UserRoleInvalidOperationException":
        return cls(f"No se puede asignar roles al usuario {user_id} porque está inactivo")

    @classmethod
    def inactive_role(cls, role_id: int) -> "UserRoleInvalidOperationException":
        return cls(f"No se puede asignar el rol {role_id} porque está inactivo")

    @classmethod
    def last_admin(cls, user_id: int) -> "UserRoleInvalidOperationException":
        return cls(
            f"No se puede desasignar el rol ADMINISTRADOR al usuario {user_id}: "
            "es el último administrador activo"
        )

    @classmethod
    def invalid_date_range(cls) -> "UserRoleInvalidOperationException":
        return cls("La fecha de inicio debe ser anterior a la fecha de fin")


# =============================================================================
# APARTAMENTOS, PARQUEADEROS Y ÁREAS COMUNES
# =============================================================================

class ApartmentNotFoundException(NotFoundException):
    default_message = "Apartamento no encontrado"

    @classmethod
    def by_id(cls, apartment_id: int) -> "ApartmentNotFoundException":
        return cls(f"Apartamento con ID {apartment_id} no encontrado")


class ParkingSpotNotFoundException(NotFoundException):
    default_message = "Parqueadero no encontrado"

    @classmethod
    def by_id(cls, parking_id: int) -> "ParkingSpotNotFoundException":
        return cls(f"Parqueadero con ID {parking_id} no encontrado")


class ParkingSpotAlreadyExistsException(AlreadyExistsException):
    default_message = "El parqueadero ya existe"

    @classmethod
    def by_number(cls, number: str) -> "ParkingSpotAlreadyExistsException":
        return cls(f"Ya existe un parqueadero con el número {number}")


class CommonAreaNotFoundException(NotFoundException):
    default_message = "Área común no encontrada"

    @classmethod
    def by_id(cls, area_id: int) -> "CommonAreaNotFoundException":
        return cls(f"Área común con ID {area_id} no encontrada")


# =============================================================================
# CORRESPONDENCIA Y SOLICITUDES
# =============================================================================

class CorrespondenceNotFoundException(NotFoundException):
    default_message = "Correspondencia no encontrada"

    @classmethod
    def by_id(cls, correspondence_id: int) -> "CorrespondenceNotFoundException":
        return cls(f"Correspondencia con ID {correspondence_id} no encontrada")


class CorrespondenceInvalidOperationException(InvalidOperationException):
    default_message = "Operación inválida sobre la correspondencia"

    @classmethod
    def already_delivered(cls, correspondence_id: int) -> "CorrespondenceInvalidOperationException":
        return cls(f"La correspondencia {correspondence_id} ya fue entregada")

    @classmethod
    def invalid_date_range(cls) -> "CorrespondenceInvalidOperationException":
        return cls("La fecha de inicio debe ser anterior a la fecha de fin")


class ServiceRequestNotFoundException(NotFoundException):
    default_message = "Solicitud no encontrada"

    @classmethod
    def by_id(cls, request_id: int) -> "ServiceRequestNotFoundException":
        return cls(f"Solicitud con ID {request_id} no encontrada")


class ServiceRequestInvalidOperationException(InvalidOperationException):
    default_message = "Operación inválida sobre la solicitud"

    @classmethod
    def invalid_date_range(cls) -> "ServiceRequestInvalidOperationException":
        return cls("La fecha de inicio debe ser anterior a la fecha de fin")
