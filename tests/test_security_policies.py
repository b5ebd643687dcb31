"""Tests de seguridad (hashing, JWT) y políticas de roles"""
from datetime import timedelta

from app.core import policies
from app.core.security import (
    create_access_token,
    create_token_pair,
    hash_password,
    validate_password_strength,
    verify_password,
    verify_token,
)


def test_password_hash_roundtrip():
    hashed = hash_password("Arkania2024")

    assert verify_password("Arkania2024", hashed)
    assert not verify_password("arkania2024", hashed)


def test_password_strength_rules():
    assert validate_password_strength("Arkania2024") == (True, None)
    assert validate_password_strength("corta1")[0] is False
    assert validate_password_strength("sinnumeros")[0] is False
    assert validate_password_strength("1234567890")[0] is False
    assert validate_password_strength("   ")[0] is False


def test_token_pair_types():
    tokens = create_token_pair({"sub": 7, "email": "a@arkania.com"})

    access = verify_token(tokens["access_token"], token_type="access")
    assert access["sub"] == "7"
    assert verify_token(tokens["access_token"], token_type="refresh") is None
    assert verify_token(tokens["refresh_token"], token_type="refresh")["sub"] == "7"


def test_expired_token_is_rejected():
    token = create_access_token({"sub": 1}, expires_delta=timedelta(seconds=-5))

    assert verify_token(token) is None


def test_invalid_permissions_are_listed():
    assert policies.invalid_permissions(["READ_USERS", "VOLAR", "ALL_PERMISSIONS"]) == ["VOLAR"]


def test_policy_limit_and_prerequisites():
    full = policies.evaluate_assignment_policy("ADMINISTRADOR", [], 5)
    resident = policies.evaluate_assignment_policy("RESIDENTE", ["ARRENDATARIO"], 0)

    assert len(full) == 1
    assert resident == []


def test_visitor_excludes_residents():
    violations = policies.evaluate_assignment_policy("VISITANTE", ["PROPIETARIO", "RESIDENTE"], 0)

    assert len(violations) == 2
