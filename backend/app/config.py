from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DEFAULT_ITERATIONS: int = 1000
    DEFAULT_TIME_HORIZON_MONTHS: int = 60
    MAX_ITERATIONS: int = 100_000
    RESULT_STORE_MAX_RECORDS: int = 100
    SIMULATION_MAX_WORKERS: int = 4
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
