"""
Medical Report Model
"""
from sqlalchemy import Column, String, Text, Integer, DateTime

from medisync.database import Base, utcnow


class MedicalReport(Base):
    """Uploaded medical report and its AI analysis"""
    __tablename__ = "medical_reports"

    # Primary key
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Owner
    user_id = Column(String(255), nullable=False, index=True)

    # File details
    filename = Column(String(255), nullable=False)
    file_size = Column(Integer, nullable=False)
    file_type = Column(String(255), nullable=False)
    r2_key = Column(String(1024), nullable=False)  # blob store key

    # Analysis
    analysis_status = Column(String(20), nullable=False, default="pending")  # pending, completed
    analysis_data = Column(Text, nullable=True)
    upload_date = Column(String(10), nullable=False)  # YYYY-MM-DD

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def to_dict(self):
        """Convert to dictionary"""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "filename": self.filename,
            "file_size": self.file_size,
            "file_type": self.file_type,
            "r2_key": self.r2_key,
            "analysis_status": self.analysis_status,
            "analysis_data": self.analysis_data,
            "upload_date": self.upload_date,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self):
        return f"<MedicalReport(id={self.id}, user={self.user_id}, file={self.filename})>"
