"""
AWS Secrets Manager integration for secure key management.
Provides retrieval of the OpenAI API key and the MongoDB connection string.
"""
import json
import logging
import os
import boto3
from botocore.exceptions import ClientError, NoCredentialsError, PartialCredentialsError
from typing import Optional, List

logger = logging.getLogger(__name__)

SECRET_NAMES = {
    'sit': 'sit/session-analyzer/secret',
    'production': 'prod/session-analyzer/secret',
    'development': '/config/session-analyzer',
}


class SecretsManager:
    """
    AWS Secrets Manager client for retrieving sensitive configuration.
    Caches retrieved values and falls back to the supplied default on failure.
    """

    def __init__(self, region_name: str = None):
        self.region_name = region_name or os.getenv("AWS_REGION", os.getenv("AWS_DEFAULT_REGION", "ap-southeast-1"))
        self._client = None
        self._cache = {}
        self._available = False

        try:
            self._client = boto3.client('secretsmanager', region_name=self.region_name)
            self._available = True
            logger.info(f"AWS Secrets Manager client initialized for region {self.region_name}")
        except NoCredentialsError:
            logger.warning("AWS credentials not found - falling back to environment variables")
        except PartialCredentialsError:
            logger.warning("Incomplete AWS credentials - falling back to environment variables")
        except Exception as e:
            logger.warning(f"Error initializing AWS Secrets Manager client: {e} - falling back to environment variables")

    @property
    def available(self) -> bool:
        return self._available and self._client is not None

    def get_secret(self, secret_name: str, fallback_value: Optional[str] = None) -> Optional[str]:
        """
        Retrieve a secret string from AWS Secrets Manager.

        Args:
            secret_name: Name or ARN of the secret
            fallback_value: Value to return if secret retrieval fails

        Returns:
            Secret value as string, or fallback_value if unavailable
        """
        if not self.available:
            logger.debug(f"AWS Secrets Manager unavailable, using fallback for {secret_name}")
            return fallback_value

        if secret_name in self._cache:
            return self._cache[secret_name]

        try:
            response = self._client.get_secret_value(SecretId=secret_name)

            if 'SecretString' in response:
                secret_value = response['SecretString']
                self._cache[secret_name] = secret_value
                logger.info(f"Retrieved secret {secret_name} from AWS Secrets Manager")
                return secret_value

        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', 'Unknown')
            if error_code == 'ResourceNotFoundException':
                logger.warning(f"Secret {secret_name} not found in AWS Secrets Manager")
            elif error_code == 'AccessDeniedException':
                logger.warning(f"Access denied for secret {secret_name} - insufficient permissions")
                self._available = False
            else:
                logger.warning(f"AWS error retrieving secret {secret_name}: {e}")

        logger.debug(f"Using fallback value for {secret_name}")
        return fallback_value


_secrets_manager = None


def get_secrets_manager() -> SecretsManager:
    """Get or create the global AWS Secrets Manager instance."""
    global _secrets_manager
    if _secrets_manager is None:
        _secrets_manager = SecretsManager()
    return _secrets_manager


def _environment_secret_name() -> str:
    app_env = os.getenv('APP_ENV', 'development').lower()
    secret_name = SECRET_NAMES.get(app_env)
    if secret_name is None:
        logger.warning(f"Unknown environment '{app_env}', defaulting to SIT secret")
        secret_name = SECRET_NAMES['sit']
    return secret_name


def _get_secret_field(key_names: List[str], fallback_secret: str, fallback_value: Optional[str]) -> Optional[str]:
    """
    Look up one field of the environment-specific JSON secret.

    Falls back to a dedicated plain-string secret, then to ``fallback_value``.
    """
    secrets_manager = get_secrets_manager()
    secret_name = _environment_secret_name()

    value = None
    secret_data = secrets_manager.get_secret(secret_name, None)
    if secret_data:
        try:
            secret_json = json.loads(secret_data)
            if isinstance(secret_json, dict):
                for key_name in key_names:
                    if key_name in secret_json:
                        value = secret_json[key_name]
                        logger.info(f"Extracted {key_name} from JSON secret {secret_name}")
                        break
        except json.JSONDecodeError:
            logger.warning(f"Secret {secret_name} is not valid JSON")

    if value is None:
        value = secrets_manager.get_secret(fallback_secret, fallback_value)

    return value


def get_openai_api_key(fallback_key: Optional[str] = None) -> Optional[str]:
    """Retrieve the OpenAI API key, falling back to ``fallback_key``."""
    return _get_secret_field(
        ['openai_api_key', 'OPENAI_API_KEY', 'openai_key', 'api_key'],
        "openai-api-key",
        fallback_key,
    )


def get_mongodb_uri(fallback_uri: Optional[str] = None) -> Optional[str]:
    """Retrieve the MongoDB connection string, falling back to ``fallback_uri``."""
    return _get_secret_field(
        ['mongodb_uri', 'MONGODB_URI', 'mongo_uri'],
        "mongodb-uri",
        fallback_uri,
    )
