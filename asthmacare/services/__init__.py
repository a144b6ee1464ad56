# =============================================================================
# asthmacare/services/__init__.py
# Service Layer for AsthmaCare
# Separates record access and business rules from the Streamlit pages
# =============================================================================
"""
Service Layer for AsthmaCare

Every owner-scoped service takes a Supabase client and the browser
session's AuthSession, and reads/writes only the signed-in user's rows.

Usage Example:
-------------
    from asthmacare.services import SymptomService

    symptoms = SymptomService(client, auth_session)
    result = symptoms.log("wheezing", severity=3, triggers=["pollen"])
    if result.success:
        print(result.data["id"])

    score = symptoms.control_score()
    print(score.score, score.level.value)
"""

from .base_service import BaseService, ServiceResult
from .profile_service import ProfileService
from .report_service import HealthReportService
from .appointment_service import AppointmentService
from .tracking_service import SymptomService, MedicationService
from .contact_service import EmergencyContactService
from .chat_service import ChatService
from .notification_service import NotificationService
from .doctor_service import DoctorService
from .export_service import ExportService
from .air_quality_service import AirQualityService, get_air_quality_color

__all__ = [
    "BaseService",
    "ServiceResult",
    "ProfileService",
    "HealthReportService",
    "AppointmentService",
    "SymptomService",
    "MedicationService",
    "EmergencyContactService",
    "ChatService",
    "NotificationService",
    "DoctorService",
    "ExportService",
    "AirQualityService",
    "get_air_quality_color",
]
