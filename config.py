import os
import log
from dotenv import load_dotenv

# Load .env file into environment
load_dotenv()


def _split_tokens(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [token.strip() for token in raw.split(",") if token.strip()]


class Config:
    def __init__(self):
        self.valkey_host = os.getenv("VALKEY_HOST", "localhost")
        self.valkey_port = int(os.getenv("VALKEY_PORT", 6379))
        self.session_ttl = int(os.getenv("SESSION_TTL", 3600))
        self.dataset_path = os.getenv("DATASET_PATH", "./data/data.json")
        self.log_level = os.getenv("LOG_LEVEL", default="INFO")
        self.log_file = os.getenv("LOG_FILE", default="conversion_chart.log")
        self.valid_tokens = _split_tokens(os.getenv("VALID_TOKENS"))

        # Call setup_logging when the application starts
        log.setup_logging(self.log_level, self.log_file)

    def __repr__(self):
        return f"<Settings host={self.valkey_host} port={self.valkey_port} loglevel={self.log_level}, dataset_path:{self.dataset_path}, session_ttl:{self.session_ttl}>"

config = Config()
