import os
from dotenv import load_dotenv

# Load environment variables from the project root (one level up from config)
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), "..", ".env"))


def _bool_env(name: str, default: str = "1") -> bool:
    value = os.getenv(name, default).strip().lower()
    return value not in {"0", "false", "no"}


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
DATABASE_ECHO = _bool_env("DATABASE_ECHO", "false")

# Enum accessor synthesis
ENUM_ACCESSOR_FAILURE_POLICY = os.getenv("ENUM_ACCESSOR_FAILURE_POLICY", "partial").strip().lower()
ENUM_ACCESSOR_ALLOW_EMPTY_VALUES = _bool_env("ENUM_ACCESSOR_ALLOW_EMPTY_VALUES", "false")
ENUM_ACCESSOR_METHOD_PREFIX = os.getenv("ENUM_ACCESSOR_METHOD_PREFIX", "is_")

if ENUM_ACCESSOR_FAILURE_POLICY not in {"partial", "atomic"}:
    raise ValueError(
        "ENUM_ACCESSOR_FAILURE_POLICY must be 'partial' or 'atomic', "
        f"got {ENUM_ACCESSOR_FAILURE_POLICY!r}."
    )
