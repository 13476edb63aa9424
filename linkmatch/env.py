import os
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv


def load_env(env_path: Optional[Path] = None) -> bool:
    """Load .env from the working directory (or env_path) if present.

    Values already set in the process environment win over the file.
    Returns True when a file was loaded.
    """
    env_path = env_path or Path.cwd() / ".env"
    if not env_path.exists():
        return False
    return load_dotenv(dotenv_path=env_path, override=False)


def google_credentials(
    api_key: Optional[str] = None,
    cse_id: Optional[str] = None,
) -> Tuple[Optional[str], Optional[str]]:
    """Resolve Custom Search credentials: explicit args, then environment."""
    key = api_key or os.getenv("GOOGLE_API_KEY")
    # GOOGLE_SEARCH_ENGINE_ID is accepted as an older name for the engine id
    cx = cse_id or os.getenv("GOOGLE_CSE_ID") or os.getenv("GOOGLE_SEARCH_ENGINE_ID")
    return key, cx
