from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./vitals.db"
    user_id: int = 1  # single-user app; every row is owned by this id
    log_level: str = "INFO"

    # Used for weight/BMR series when nothing is stored yet
    default_weight_kg: float = 70.0
    default_age: int = 25
    default_height_cm: float = 170.0
    default_gender: str = "male"

    class Config:
        env_prefix = "VITALS_"
        env_file = ".env"
        env_file_encoding = "utf-8"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
