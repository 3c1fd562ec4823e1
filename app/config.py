import os
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


class Settings:
    # -------------------------------------------------------
    # Project
    # -------------------------------------------------------
    PROJECT_NAME: str = "Family Tree API"
    ENV: str = os.getenv("ENV", "dev")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # -------------------------------------------------------
    # Database
    # -------------------------------------------------------
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./familytree.db"
    )

    # Render uses postgres:// but SQLAlchemy needs postgresql://
    if DATABASE_URL.startswith("postgres://"):
        DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

    # Seed default users and the starting family into an empty database
    SEED_DATABASE: bool = os.getenv("SEED_DATABASE", "true").lower() in ("1", "true", "yes")
    OWNER_PASSWORD: str = os.getenv("OWNER_PASSWORD", "4723")
    CONTRIBUTOR_PASSWORD: str = os.getenv("CONTRIBUTOR_PASSWORD", "2584")

    # -------------------------------------------------------
    # Authentication / JWT
    # -------------------------------------------------------
    SECRET_KEY: str = os.getenv(
        "SECRET_KEY",
        "supersecretlocalkey123"   # Only used for local dev
    )
    ALGORITHM: str = "HS256"

    # 1 day token expiry by default
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
        os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24)
    )

    # -------------------------------------------------------
    # CORS
    # -------------------------------------------------------
    CORS_ORIGINS: list[str] = [
        o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
    ]

    # -------------------------------------------------------
    # Tree editing rules
    # -------------------------------------------------------
    # "allow": a sibling of a parentless person is stored without a parent
    # "reject": the add is refused with a validation error
    SIBLING_WITHOUT_PARENT: str = os.getenv("SIBLING_WITHOUT_PARENT", "allow").lower()

    # -------------------------------------------------------
    # Generative text (relationship prose, geocoding)
    # -------------------------------------------------------
    GEMINI_API_KEY: str | None = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")


# Single instance that is imported everywhere
settings = Settings()
