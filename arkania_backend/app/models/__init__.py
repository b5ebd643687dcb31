"""Modelos SQLAlchemy"""
from app.models.user import User, DocumentType
from app.models.role import Role
from app.models.user_role import UserRole
from app.models.apartment import Apartment, UnitStatus
from app.models.parking_spot import ParkingSpot, ParkingRoleType
from app.models.common_area import CommonArea, CommonAreaStatus
from app.models.correspondence import Correspondence, CorrespondenceType, CorrespondenceStatus
from app.models.service_request import ServiceRequest, RequestType, RequestStatus

__all__ = [
    "User",
    "DocumentType",
    "Role",
    "UserRole",
    "Apartment",
    "UnitStatus",
    "ParkingSpot",
    "ParkingRoleType",
    "CommonArea",
    "CommonAreaStatus",
    "Correspondence",
    "CorrespondenceType",
    "CorrespondenceStatus",
    "ServiceRequest",
    "RequestType",
    "RequestStatus",
]
