# pulse/config.py

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

class Config:
    # General settings
    SECRET_KEY = os.getenv("SECRET_KEY", "your_secret_key")
    DEBUG = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Supabase configuration (service role key, bypasses RLS)
    SUPABASE_URL = os.getenv("SUPABASE_URL")
    SUPABASE_KEY = os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    MOCK_DB = os.getenv("MOCK_DB", "false")

    # JWT configuration
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "your_jwt_secret_key")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

    # LLM Configuration
    LLM_PROVIDER = os.getenv("LLM_PROVIDER", "gemini") # 'gemini', 'openai', or 'local'
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
    OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")
    LOCAL_LLM_URL = os.getenv("LOCAL_LLM_URL", "http://localhost:8080/v1")
    LOCAL_LLM_MODEL = os.getenv("LOCAL_LLM_MODEL", "gemma-2-9b-it")
    LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", 0.7))

    # Plan generation needs a large output budget or the 56-day array gets truncated
    PLAN_MAX_OUTPUT_TOKENS = int(os.getenv("PLAN_MAX_OUTPUT_TOKENS", 65536))
    CHAT_MAX_OUTPUT_TOKENS = int(os.getenv("CHAT_MAX_OUTPUT_TOKENS", 1024))
    FOLLOWUP_MAX_OUTPUT_TOKENS = int(os.getenv("FOLLOWUP_MAX_OUTPUT_TOKENS", 512))

    # Chat context window
    CHAT_HISTORY_LIMIT = int(os.getenv("CHAT_HISTORY_LIMIT", 10))
    CONTEXT_DAYS_BACK = int(os.getenv("CONTEXT_DAYS_BACK", 7))
    CONTEXT_DAYS_FORWARD = int(os.getenv("CONTEXT_DAYS_FORWARD", 7))

    # CORS: Use a default for local development; override in production
    CORS_ORIGIN = os.getenv("CORS_ORIGIN", "http://localhost:3000,http://localhost:3001")

class DevelopmentConfig(Config):
    DEBUG = True

class ProductionConfig(Config):
    DEBUG = False

class TestingConfig(Config):
    TESTING = True
    DEBUG = True
    RATELIMIT_ENABLED = False
