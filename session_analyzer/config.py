import os
from dotenv import load_dotenv


def load_environment_config():
    """
    Load environment-specific configuration based on APP_ENV.

    Environments:
    - production: Uses .env.production
    - sit: Uses .env.sit
    - test: Uses .env.test
    - development: Uses .env (default)
    """
    env = os.getenv('APP_ENV', 'development').lower()

    env_files = {
        'production': '.env.production',
        'sit': '.env.sit',
        'test': '.env.test',
        'development': '.env',
    }

    env_file = env_files.get(env, '.env')

    if os.path.exists(env_file):
        load_dotenv(env_file)
        print(f"🔧 Loaded configuration from: {env_file}")
    else:
        load_dotenv()
        print(f"⚠️  Environment file {env_file} not found, using default .env")
        if env != 'development':
            print(f"💡 Create {env_file} for {env} environment configuration")


load_environment_config()

APP_ENV = os.getenv('APP_ENV', 'development').lower()

# AWS Secrets Manager integration (conditional)
USE_SECRETS_MANAGER: bool = os.getenv('USE_SECRETS_MANAGER', 'false').lower() == 'true'

if USE_SECRETS_MANAGER:
    try:
        from session_analyzer.services.aws_secrets import get_mongodb_uri, get_openai_api_key, get_secrets_manager

        secrets_manager = get_secrets_manager()

        if secrets_manager.available:
            OPENAI_API_KEY = get_openai_api_key(os.getenv("OPENAI_API_KEY", ""))
            MONGODB_URI = get_mongodb_uri(os.getenv("MONGODB_URI", ""))
            print(f"🔐 AWS Secrets Manager: Connected - Using secure secrets from region {secrets_manager.region_name}")
        else:
            OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
            MONGODB_URI = os.getenv("MONGODB_URI", "")
            print("⚠️  AWS Secrets Manager: Unavailable - Using environment variables")

    except ImportError as e:
        print(f"⚠️  AWS Secrets Manager import failed: {e} - Using environment variables")
        OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
        MONGODB_URI = os.getenv("MONGODB_URI", "")
else:
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
    MONGODB_URI = os.getenv("MONGODB_URI", "")
    print("🔧 AWS Secrets Manager: Disabled - Using environment variables only")

AWS_REGION = os.getenv("AWS_REGION", "ap-southeast-1")

# OpenAI
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4")
OPENAI_TIMEOUT = float(os.getenv("OPENAI_TIMEOUT", "60"))

# MongoDB
MONGODB_DATABASE = os.getenv("MONGODB_DATABASE", "rating-analyzer")
MONGODB_COLLECTION = os.getenv("MONGODB_COLLECTION", "sessions")

# Maximum number of execution attempts per generated pipeline (first run included)
MAX_QUERY_RETRIES = int(os.getenv("MAX_QUERY_RETRIES", "2"))
if MAX_QUERY_RETRIES < 1:
    raise ValueError(f"MAX_QUERY_RETRIES must be at least 1, got {MAX_QUERY_RETRIES}")

MAX_QUERY_LENGTH = int(os.getenv("MAX_QUERY_LENGTH", "1000"))

# Raw results returned to the client: everything up to the full limit, otherwise a truncated head
RAW_RESULTS_FULL_LIMIT = int(os.getenv("RAW_RESULTS_FULL_LIMIT", "200"))
RAW_RESULTS_TRUNCATED_SIZE = int(os.getenv("RAW_RESULTS_TRUNCATED_SIZE", "50"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Application port configuration
APP_PORT = int(os.getenv("APP_PORT", "3000"))


# Parse CORS origins from comma-separated string
cors_origins_str = os.getenv("CORS_ORIGINS", "*")
CORS_ORIGINS = [origin.strip() for origin in cors_origins_str.split(",") if origin.strip()]

CORS_ALLOW_CREDENTIALS = os.getenv("CORS_ALLOW_CREDENTIALS", "true").lower() == "true"

cors_methods_str = os.getenv("CORS_ALLOW_METHODS", "*")
CORS_ALLOW_METHODS = [method.strip() for method in cors_methods_str.split(",") if method.strip()] if cors_methods_str != "*" else ["*"]

cors_headers_str = os.getenv("CORS_ALLOW_HEADERS", "*")
CORS_ALLOW_HEADERS = [header.strip() for header in cors_headers_str.split(",") if header.strip()] if cors_headers_str != "*" else ["*"]

CORS_MAX_AGE = int(os.getenv("CORS_MAX_AGE", "600"))
