"""
Centralized application configuration
"""
import os
from typing import Dict, List, Optional
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def split_roles(value: str) -> List[str]:
    """Parse a comma separated role list such as "manager,driver"."""
    return [part.strip().lower() for part in value.split(",") if part.strip()]


class Settings(BaseSettings):
    """Application settings from environment variables"""

    # ============================================
    # Application Settings
    # ============================================
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING")

    # ============================================
    # Database Settings
    # ============================================
    # Full URL wins over the individual parts when set.
    DATABASE_URL: Optional[str] = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "pizzastore"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    CONNECT_RETRIES: int = 1
    CONNECT_RETRY_DELAY: int = 5

    # ============================================
    # Order Settings
    # ============================================
    RECENT_ORDERS_LIMIT: int = 5

    # ============================================
    # Authorization Policy
    # ============================================
    EDIT_MENU_ROLES: str = "manager"
    MANAGE_USERS_ROLES: str = "manager"
    ORDER_STATUS_ROLES: str = "manager"
    ALLOW_SELF_ROLE_CHANGE: bool = True

    class Config:
        case_sensitive = True
        env_file = ".env"
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.ENVIRONMENT == "production"

    def database_url(self, dbname: Optional[str] = None, port: Optional[int] = None,
                     user: Optional[str] = None) -> str:
        """
        Build the SQLAlchemy URL.

        Explicit arguments (the command line dbname/port/user) override the
        configured parts. DATABASE_URL is only used when no override is given.
        """
        if self.DATABASE_URL and not (dbname or port or user):
            url = self.DATABASE_URL
            # Heroku/Railway style URLs
            if url.startswith("postgres://"):
                url = url.replace("postgres://", "postgresql://", 1)
            return url

        user = user or self.DB_USER
        credentials = quote_plus(user)
        if self.DB_PASSWORD:
            credentials += ":" + quote_plus(self.DB_PASSWORD)
        return (
            f"postgresql+psycopg2://{credentials}@{self.DB_HOST}:"
            f"{port or self.DB_PORT}/{dbname or self.DB_NAME}"
        )

    def capability_roles(self) -> Dict[str, List[str]]:
        """Capability name -> roles allowed to exercise it"""
        return {
            "edit_menu": split_roles(self.EDIT_MENU_ROLES),
            "manage_users": split_roles(self.MANAGE_USERS_ROLES),
            "set_order_delivered": split_roles(self.ORDER_STATUS_ROLES),
        }

    def validate_settings(self) -> List[str]:
        """Validate critical settings and return warnings"""
        warnings = []
        valid_roles = {"customer", "manager", "driver"}

        for capability, roles in self.capability_roles().items():
            if not roles:
                warnings.append(
                    f"No role holds '{capability}'; nobody can use it")
            unknown = set(roles) - valid_roles
            if unknown:
                warnings.append(
                    f"Unknown roles for '{capability}': {sorted(unknown)}")

        if self.is_production:
            if not self.DB_PASSWORD and not self.DATABASE_URL:
                warnings.append("Connecting without a database password")
            if self.ALLOW_SELF_ROLE_CHANGE:
                warnings.append(
                    "Users may change their own role (ALLOW_SELF_ROLE_CHANGE)")

        return warnings


# Create global settings instance
settings = Settings()
