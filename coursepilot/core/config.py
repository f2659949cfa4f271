from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    catalog_path: str | None = None
    log_level: str = "INFO"
    credits_required_for_degree: int = 120
    # Referenced by the general-elective rule but not enforced by the engine
    general_elective_credit_cap: int = 8
    recommendation_limit: int = 20
    alternatives_limit: int = 5
    search_limit: int = 30

    class Config:
        env_prefix = "COURSEPILOT_"
        env_file = ".env"
        extra = "ignore"


settings = Settings()
