"""
Módulo de seguridad - JWT y Hashing
Conjunto Residencial Arkania

Proporciona funciones para:
- Hashing y verificación de contraseñas con bcrypt
- Generación y verificación de tokens JWT (access y refresh)
- Validación de fortaleza de contraseñas
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings


# =============================================================================
# HASHING DE CONTRASEÑAS
# =============================================================================

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Genera un hash bcrypt de la contraseña"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifica una contraseña contra su hash"""
    return pwd_context.verify(plain_password, hashed_password)


# =============================================================================
# TOKENS JWT
# =============================================================================

def _create_token(data: Dict[str, Any], token_type: str, expires_delta: timedelta) -> str:
    to_encode = data.copy()
    # El claim "sub" debe ser string
    if "sub" in to_encode:
        to_encode["sub"] = str(to_encode["sub"])
    to_encode.update({
        "exp": datetime.now(timezone.utc) + expires_delta,
        "type": token_type
    })
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None
) -> str:
    """Crea un token JWT de acceso"""
    return _create_token(
        data,
        "access",
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )


def create_refresh_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None
) -> str:
    """Crea un token JWT de refresh"""
    return _create_token(
        data,
        "refresh",
        expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    )


def verify_token(
    token: str,
    token_type: str = "access"
) -> Optional[Dict[str, Any]]:
    """
    Verifica y decodifica un token JWT

    Returns:
        Dict con el payload si el token es válido y del tipo esperado, None si no
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
    except JWTError:
        return None

    if payload.get("type") != token_type:
        return None

    return payload


def create_token_pair(user_data: Dict[str, Any]) -> Dict[str, str]:
    """Crea el par de tokens (access y refresh) para un usuario"""
    return {
        "access_token": create_access_token(data=user_data),
        "refresh_token": create_refresh_token(data={"sub": user_data.get("sub")}),
        "token_type": "bearer"
    }


# =============================================================================
# VALIDACIÓN DE CONTRASEÑAS
# =============================================================================

def validate_password_strength(password: str) -> tuple[bool, Optional[str]]:
    """
    Valida que una contraseña cumpla los requisitos mínimos

    Returns:
        (es_válida, mensaje_de_error)
    """
    min_length = settings.PASSWORD_MIN_LENGTH

    if password is None or not password.strip():
        return False, "La contraseña no puede estar vacía"

    if len(password) < min_length:
        return False, f"La contraseña debe tener al menos {min_length} caracteres"

    if not any(c.isalpha() for c in password):
        return False, "La contraseña debe contener al menos una letra"

    if not any(c.isdigit() for c in password):
        return False, "La contraseña debe contener al menos un número"

    return True, None
