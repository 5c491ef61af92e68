from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Path to an alternate YAML ruleset; empty means the packaged default
    ruleset_path: str = ""
    # Raise instead of warn when a ruleset names rules that have no predicate
    strict_ruleset: bool = False

    model_config = SettingsConfigDict(
        env_prefix="COMPETITIVENESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
