"""
Políticas de roles y usuarios
Conjunto Residencial Arkania

Datos estáticos de configuración:
- Roles por defecto con su descripción y permisos
- Catálogo de permisos válidos
- Límites, exclusiones, prerequisitos y expiraciones por rol
- Tipos de documento

Las restricciones de asignación (límites, exclusiones, prerequisitos) NO se
aplican automáticamente al asignar roles; solo se consultan mediante
`evaluate_assignment_policy`.
"""
from typing import Dict, List


# =============================================================================
# ROLES
# =============================================================================

ADMIN_ROLE = "ADMINISTRADOR"
OWNER_ROLE = "PROPIETARIO"

# No se pueden eliminar
CRITICAL_ROLES = (ADMIN_ROLE, OWNER_ROLE)

ROLE_NAME_PATTERN = r"^[A-Z_]+$"

DEFAULT_ROLES: Dict[str, Dict] = {
    "ADMINISTRADOR": {
        "description": "Administrador del sistema con acceso completo a todas las funcionalidades",
        "permissions": ["ALL_PERMISSIONS"],
    },
    "PROPIETARIO": {
        "description": "Propietario de apartamento con derechos sobre su propiedad y áreas comunes",
        "permissions": ["READ_PROFILE", "UPDATE_PROFILE", "READ_CORRESPONDENCE"],
    },
    "ARRENDATARIO": {
        "description": "Persona que arrienda un apartamento con permisos limitados",
        "permissions": ["READ_PROFILE", "UPDATE_PROFILE"],
    },
    "RESIDENTE": {
        "description": "Persona que reside en el conjunto pero no es propietario ni arrendatario principal",
        "permissions": ["READ_PROFILE", "UPDATE_PROFILE"],
    },
    "VIGILANTE": {
        "description": "Personal de seguridad del conjunto residencial",
        "permissions": ["READ_VISITORS", "MANAGE_ACCESS"],
    },
    "CONSERJE": {
        "description": "Personal de mantenimiento y servicios generales",
        "permissions": ["READ_PROFILE", "READ_CORRESPONDENCE", "WRITE_CORRESPONDENCE"],
    },
    "VISITANTE": {
        "description": "Persona temporal con acceso limitado al conjunto",
        "permissions": ["LIMITED_ACCESS"],
    },
    "PROVEEDOR": {
        "description": "Empresa o persona que presta servicios al conjunto residencial",
        "permissions": ["LIMITED_ACCESS"],
    },
}


# =============================================================================
# PERMISOS
# =============================================================================

ALL_PERMISSIONS = "ALL_PERMISSIONS"

_RESOURCES = ("USERS", "ROLES", "APARTMENTS", "CORRESPONDENCE", "VISITORS")

VALID_PERMISSIONS = frozenset(
    [ALL_PERMISSIONS]
    + [f"{action}_{resource}" for resource in _RESOURCES for action in ("READ", "WRITE", "DELETE")]
    + ["READ_PROFILE", "UPDATE_PROFILE", "MANAGE_ACCESS", "LIMITED_ACCESS"]
)


def invalid_permissions(permissions: List[str]) -> List[str]:
    """Retorna los permisos que no pertenecen al catálogo"""
    return [p for p in permissions if p not in VALID_PERMISSIONS]


# =============================================================================
# RESTRICCIONES DE ASIGNACIÓN
# =============================================================================

MAX_USERS_PER_ROLE: Dict[str, int] = {
    "ADMINISTRADOR": 5,
    "PROPIETARIO": 1000,
    "ARRENDATARIO": 1000,
    "RESIDENTE": 2000,
    "VIGILANTE": 10,
    "CONSERJE": 5,
    "VISITANTE": 10000,
    "PROVEEDOR": 100,
}

EXCLUSIVE_ROLES: Dict[str, List[str]] = {
    "PROPIETARIO": ["ARRENDATARIO"],
    "ARRENDATARIO": ["PROPIETARIO"],
    "VISITANTE": ["PROPIETARIO", "ARRENDATARIO", "RESIDENTE"],
}

# Basta con tener uno de los roles de la lista
PREREQUISITE_ROLES: Dict[str, List[str]] = {
    "RESIDENTE": ["PROPIETARIO", "ARRENDATARIO"],
}

EXPIRATION_DAYS: Dict[str, int] = {
    "VISITANTE": 7,
    "PROVEEDOR": 90,
}

RENEWAL_DAYS: Dict[str, int] = {
    "VIGILANTE": 365,
    "CONSERJE": 365,
    "PROVEEDOR": 180,
}


def evaluate_assignment_policy(
    role_name: str,
    current_roles: List[str],
    active_users_with_role: int
) -> List[str]:
    """
    Evalúa la asignación de un rol contra las políticas estáticas

    Args:
        role_name: Rol que se quiere asignar
        current_roles: Roles activos que ya tiene el usuario
        active_users_with_role: Usuarios que ya tienen el rol activo

    Returns:
        Lista de violaciones (vacía si la asignación cumple todas las políticas)
    """
    violations = []

    limit = MAX_USERS_PER_ROLE.get(role_name)
    if limit is not None and active_users_with_role >= limit:
        violations.append(f"El rol {role_name} alcanzó el límite de {limit} usuarios")

    for excluded in EXCLUSIVE_ROLES.get(role_name, []):
        if excluded in current_roles:
            violations.append(f"El rol {role_name} es incompatible con {excluded}")

    prerequisites = PREREQUISITE_ROLES.get(role_name)
    if prerequisites and not any(p in current_roles for p in prerequisites):
        violations.append(
            f"El rol {role_name} requiere uno de estos roles: {', '.join(prerequisites)}"
        )

    return violations


# =============================================================================
# USUARIOS
# =============================================================================

DOCUMENT_TYPE_DESCRIPTIONS: Dict[str, str] = {
    "CC": "Cédula de Ciudadanía",
    "CE": "Cédula de Extranjería",
    "TI": "Tarjeta de Identidad",
    "PP": "Pasaporte",
    "NIT": "Número de Identificación Tributaria",
}
