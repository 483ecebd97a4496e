import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from uni_mail.gmail.client import GmailClientConfig

# Load .env once, globally
load_dotenv()


def uni_home() -> Path:
    """Per-user state directory shared by the uni services (~/.uni)."""
    return Path.home() / ".uni"


def resolve_dir(env_key: str, default: str) -> Path:
    """
    Resolve a directory path from ENV.
    Relative ENV values are resolved against the working directory,
    the default against uni_home(). Nothing is created here.
    """
    value = os.getenv(env_key)
    if not value:
        return uni_home() / default

    path = Path(value).expanduser()
    if not path.is_absolute():
        path = Path.cwd() / path
    return path


def secrets_dir() -> Path:
    return resolve_dir("UNI_MAIL_SECRETS_DIR", "tokens")


def log_level() -> str:
    return os.getenv("UNI_MAIL_LOG_LEVEL", "INFO").upper()


def load_gmail_config(secrets: Optional[Path] = None) -> GmailClientConfig:
    secrets = secrets or secrets_dir()
    credentials_path = secrets / "credentials.json"
    if not credentials_path.exists():
        raise RuntimeError(
            f"Missing Gmail credentials at {credentials_path}. "
            "Did you configure UNI_MAIL_SECRETS_DIR?"
        )

    return GmailClientConfig(
        credentials_path=credentials_path,
        token_path=secrets / "gmail_token.json",
        user_id="me",
    )
