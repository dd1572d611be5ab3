"""
Database Models Package
"""
from medisync.models.medical_report import MedicalReport
from medisync.models.organ_metric import OrganMetric
from medisync.models.chat_message import ChatMessage

__all__ = [
    "MedicalReport",
    "OrganMetric",
    "ChatMessage"
]
