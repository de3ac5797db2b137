"""Secrets Manager integration for provider API keys."""
import json
import logging
from typing import Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from market_signal.app.errors import ConfigurationError
from market_signal.app.settings import Settings

logger = logging.getLogger(__name__)

# Secret JSON keys -> Settings attributes
SECRET_KEYS: Dict[str, str] = {
    "NEWS_API_KEY": "news_api_key",
    "OPENAI_API_KEY": "openai_api_key",
    "LANGSMITH_API_KEY": "langsmith_api_key",
}

REQUIRED_KEYS = ("news_api_key", "openai_api_key")


def fetch_secret_payload(secret_name: str, region: str) -> Dict[str, str]:
    """Read a JSON secret string from AWS Secrets Manager."""
    session = boto3.Session(region_name=region)
    client = session.client("secretsmanager")
    response = client.get_secret_value(SecretId=secret_name)
    return json.loads(response.get("SecretString", "{}"))


def load_missing_secrets(settings: Settings, fetch=fetch_secret_payload) -> None:
    """Fill keys absent from the environment from Secrets Manager, if configured."""
    if not settings.secrets_manager_secret_name:
        return
    missing = {name: attr for name, attr in SECRET_KEYS.items() if not getattr(settings, attr)}
    if not missing:
        return
    try:
        secrets = fetch(settings.secrets_manager_secret_name, settings.aws_region)
    except (ClientError, BotoCoreError, ValueError) as exc:
        raise ConfigurationError(f"Could not load secrets from Secrets Manager: {exc}") from exc

    for name, attr in missing.items():
        value: Optional[str] = secrets.get(name)
        if value:
            setattr(settings, attr, value)
            logger.info("Loaded %s from Secrets Manager", name)


def validate_required_keys(settings: Settings) -> None:
    """Refuse to serve traffic without both provider keys."""
    missing = [attr for attr in REQUIRED_KEYS if not getattr(settings, attr)]
    if missing:
        names = ", ".join(attr.upper() for attr in missing)
        raise ConfigurationError(f"Missing required configuration: {names}")
