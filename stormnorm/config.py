from pydantic_settings import BaseSettings

from stormnorm.data.taxonomy import DEFAULT_REWRITE_RULES


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Matching policy: scores below this fall back to fallback_category.
    # 0.4 keeps most misspellings while rejecting unrelated free text.
    min_similarity: float = 0.4
    fallback_category: str = "Other"

    # Rewrite rules as (pattern, replacement); set as JSON in the environment,
    # e.g. REWRITE_RULES='[["TSTM", "Thunderstorm"]]'
    rewrite_rules: list[tuple[str, str]] = DEFAULT_REWRITE_RULES

    # Input
    label_column: str = "EVTYPE"

    # App
    log_level: str = "INFO"


settings = Settings()
