from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List, Dict


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required so the API can write documents of every member

    # Collections (one table per managed document kind)
    collection_groups: str = "qm_groups"
    collection_memberships: str = "qm_memberships"
    collection_people: str = "qm_people"
    collection_quotes: str = "qm_quotes"
    collection_invites: str = "qm_invites"

    # Invites
    invite_code_length: int = 8
    invite_code_max_attempts: int = 5
    default_invite_name: str = "General"

    # Store paging used when loading whole collections for a group
    page_size: int = 100

    # App
    app_name: str = "quotes-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def collections(self) -> Dict[str, str]:
        """Document kind -> table name"""
        return {
            "groups": self.collection_groups,
            "memberships": self.collection_memberships,
            "people": self.collection_people,
            "quotes": self.collection_quotes,
            "invites": self.collection_invites,
        }

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore",
        frozen=True,
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
