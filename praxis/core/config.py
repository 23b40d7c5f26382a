import os
from dotenv import load_dotenv

load_dotenv()  # Load from .env file

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./praxis.db")
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Token verification (tokens are issued by the auth provider)
SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# CORS
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if o.strip()]

# Dev login
DEV_USER_EMAIL = os.getenv("DEV_USER_EMAIL", "test@praxis.dev")

# Matching
MATCH_DOMAIN_WEIGHT = float(os.getenv("MATCH_DOMAIN_WEIGHT", "0.7"))
MATCH_NAME_WEIGHT = float(os.getenv("MATCH_NAME_WEIGHT", "0.3"))
MATCH_NAME_SIMILARITY = os.getenv("MATCH_NAME_SIMILARITY", "lexical")  # "lexical" or "embedding"
MATCH_RESULT_LIMIT = int(os.getenv("MATCH_RESULT_LIMIT", "50"))
EMBED_MODEL = os.getenv("EMBED_MODEL", "all-MiniLM-L6-v2")
EMBED_CACHE_SIZE = int(os.getenv("EMBED_CACHE_SIZE", "4096"))
