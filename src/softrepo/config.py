import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load the appropriate .env file on module import
env = os.environ.get("SOFTREPO_ENV", "development").lower()
env_file = f".env.{env}"
if os.path.exists(env_file):
    load_dotenv(env_file)
else:
    # Fall back to the default .env file
    load_dotenv()


@dataclass
class Config:
    environment: str
    database_url: str
    log_level: str
    soft_delete_field: str

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            environment=env,
            database_url=os.environ.get(
                "DATABASE_URL", "postgresql://localhost:5432/softrepo"
            ),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            soft_delete_field=os.environ.get("SOFT_DELETE_FIELD", "deleted_at"),
        )


config = Config.from_env()
