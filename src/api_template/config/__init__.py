from dotenv import load_dotenv

from api_template.config.config import Config
from api_template.config.constants import CONFIG_DIR, PROJECT_ROOT

# Secrets (JWT key, DB connection string) come from the environment / .env.
load_dotenv()

# Load once at import time.
configuration: Config = Config.load_from_file(file_path=CONFIG_DIR / "config.yml")

__all__ = [
    "Config",
    "configuration",
    "PROJECT_ROOT",
    "CONFIG_DIR",
]
