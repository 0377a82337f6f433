from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    database_url: str
    cors_origins: str = ""
    log_level: str = "INFO"

    # Manual slots that overlap an existing slot for the same staff member are
    # flagged by default; set to true to reject them instead.
    strict_slot_conflicts: bool = False

    max_generation_days: int = 62

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
