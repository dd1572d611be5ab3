"""
Application configuration and settings
"""
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # App metadata
    APP_NAME: str = "MediSync AI"
    APP_VERSION: str = "1.0.0"
    API_V1_STR: str = "/api"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./medisync.db"

    # Blob storage for uploaded reports
    BLOB_STORAGE_DIR: str = "./storage"

    # Stand-in for a real identity provider
    DEMO_USER_ID: str = "demo-user"

    # Google generative-language API
    GEMINI_API_KEY: str = ""
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL: str = "gemini-pro"
    GEMINI_TIMEOUT_SECONDS: float = 60.0

    # Prompt context sizes
    REPORT_CONTENT_LIMIT: int = 5000
    CHAT_CONTEXT_METRICS: int = 20
    CHAT_CONTEXT_REPORTS: int = 5
    CHAT_HISTORY_LIMIT: int = 50

    # CORS - comma-separated
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Create settings instance
settings = Settings()


ANALYSIS_PROMPT_TEMPLATE = """Analyze this medical report and extract health metrics for heart, lungs, liver, and kidneys.

File: {filename}
Content: {content}

Please provide:
1. Detected organ metrics and values
2. Health status (excellent/normal/concerning)
3. Key findings

Format as JSON with structure:
{{
  "organs": {{
    "heart": {{"metrics": [{{"name": "", "value": "", "status": "", "trend": ""}}], "health": 0-100}},
    "lungs": {{"metrics": [{{"name": "", "value": "", "status": "", "trend": ""}}], "health": 0-100}},
    "liver": {{"metrics": [{{"name": "", "value": "", "status": "", "trend": ""}}], "health": 0-100}},
    "kidneys": {{"metrics": [{{"name": "", "value": "", "status": "", "trend": ""}}], "health": 0-100}}
  }},
  "findings": "",
  "recommendations": ""
}}"""


# System prompt for the chat assistant
CHAT_SYSTEM_PROMPT_TEMPLATE = """You are MediSync AI, a highly trained HIPAA-compliant medical assistant powered by Google's Gemini AI. You specialize in:

1. **Medical Report Analysis**: Interpreting lab results, diagnostic reports, and medical records
2. **Medication Guidance**: Explaining medications, dosages, timing, interactions, and side effects
3. **Health Education**: Providing clear, evidence-based explanations of medical conditions, symptoms, and treatments
4. **Preventive Care**: Offering lifestyle recommendations, screening guidelines, and wellness tips
5. **Medical Terminology**: Translating complex medical jargon into plain language

**Guidelines:**
- Always provide accurate, evidence-based medical information
- Use clear, compassionate language appropriate for patients
- When discussing specific health concerns, encourage consultation with healthcare providers
- Never provide diagnoses or replace professional medical advice
- Respect patient privacy and maintain HIPAA compliance
- Be supportive and empathetic in all interactions
- Cite reliable medical sources when relevant (CDC, WHO, Mayo Clinic, etc.)

**Patient Context:**
{metrics_context}
{reports_context}

**Patient Question:** "{message}"

Provide a helpful, accurate, and compassionate response. Keep it concise (2-3 paragraphs) unless the question requires more detail."""


ANALYSIS_FALLBACK_TEXT = "Analysis complete. Data has been added to your health dashboard."

CHAT_EMPTY_FALLBACK_TEXT = (
    "I can help you understand your health metrics, medications, and medical reports. "
    "What would you like to know?"
)

CHAT_ERROR_FALLBACK_TEXT = (
    "I'm here to help with your medical questions. You can ask me about:\n\n"
    "• Understanding your lab results and health metrics\n"
    "• Medication information (dosages, timing, interactions)\n"
    "• Explanations of medical terms and conditions\n"
    "• Lifestyle and preventive care recommendations\n\n"
    "What would you like to know?"
)


CHAT_GENERATION_CONFIG = {
    "temperature": 0.7,
    "topK": 40,
    "topP": 0.95,
    "maxOutputTokens": 1024,
}

CHAT_SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
]


# Dashboard organs and their display colors
DEFAULT_ORGANS = ["heart", "lungs", "liver", "kidneys"]

ORGAN_COLORS = {
    "heart": "#FF6B9D",
    "lungs": "#4ECDC4",
    "liver": "#FFB84D",
    "kidneys": "#A78BFA",
}

DEFAULT_ORGAN_COLOR = "#95A5A6"
