from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "Marketplace Reservations"
    API_PREFIX: str = "/api"

    # Server
    PORT: int = 8000
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/errors.log"

    # Settlement
    COMMISSION_RATE: float = 0.05

    # Seed data (empty = bundled marketplace/data/seed.json)
    SEED_DATA_PATH: str = ""

    # Artificial delay applied to every store call, in milliseconds
    SIMULATED_LATENCY_MS: int = 0

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
