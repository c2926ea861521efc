"""
Configuration

Loads service settings from the environment (and a local .env file).
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

REQUIRED_VARS = [
    'AIRTABLE_BASE_ID',
    'AIRTABLE_API_KEY',
    'HCB_API_TOKEN',
    'BASIC_AUTH_USERNAME',
    'BASIC_AUTH_PASSWORD'
]


class Settings(BaseModel):
    """Runtime configuration for the disbursement service."""
    airtable_base_id: str
    airtable_api_key: str
    airtable_events_view: str = "viwd1z4JsMUf15DNb"
    airtable_events_table: str = "events"
    airtable_disbursements_table: str = "disbursements"
    hcb_api_token: str
    hcb_base_url: str = "https://hcb.hackclub.com/api/v4"
    hcb_organization_id: str = Field("campfire", description="Operating organization slug")
    program_name: str = Field("Campfire", description="Prefix used in transfer names")
    basic_auth_username: str
    basic_auth_password: str
    request_timeout: float = 30.0
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Load and validate environment configuration.

    Args:
        env_file: Optional path to a .env file (defaults to ./.env lookup)

    Returns:
        Settings instance

    Raises:
        RuntimeError: If required environment variables are missing
    """
    if not load_dotenv(env_file):
        logger.info("No .env file found, using environment variables")

    missing = [var for var in REQUIRED_VARS if not os.getenv(var)]

    if missing:
        raise RuntimeError(
            f"Missing required environment variables: {', '.join(missing)}\n"
            f"Please copy .env.example to .env and fill in the values."
        )

    return Settings(
        airtable_base_id=os.getenv('AIRTABLE_BASE_ID'),
        airtable_api_key=os.getenv('AIRTABLE_API_KEY'),
        airtable_events_view=os.getenv('AIRTABLE_EVENTS_VIEW', 'viwd1z4JsMUf15DNb'),
        airtable_events_table=os.getenv('AIRTABLE_EVENTS_TABLE', 'events'),
        airtable_disbursements_table=os.getenv('AIRTABLE_DISBURSEMENTS_TABLE', 'disbursements'),
        hcb_api_token=os.getenv('HCB_API_TOKEN'),
        hcb_base_url=os.getenv('HCB_BASE_URL', 'https://hcb.hackclub.com/api/v4'),
        hcb_organization_id=os.getenv('HCB_ORGANIZATION_ID', 'campfire'),
        program_name=os.getenv('PROGRAM_NAME', 'Campfire'),
        basic_auth_username=os.getenv('BASIC_AUTH_USERNAME'),
        basic_auth_password=os.getenv('BASIC_AUTH_PASSWORD'),
        request_timeout=float(os.getenv('REQUEST_TIMEOUT', '30')),
        host=os.getenv('HOST', '0.0.0.0'),
        port=int(os.getenv('PORT', '8080')),
        log_level=os.getenv('LOG_LEVEL', 'INFO')
    )
