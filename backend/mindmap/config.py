import logging
import os
from dataclasses import asdict, dataclass, field
from typing import List, Optional, Tuple

from dotenv import load_dotenv

# Load .env from project root
load_dotenv()

logger = logging.getLogger(__name__)


VIEWS = ("mindmap", "tree", "dependency", "table", "matrix", "dashboard")
THEMES = ("light", "dark", "auto")
LOG_LEVELS = ("debug", "info", "warning", "error", "critical")

# Module prefixes whose types never become data-object nodes
DEFAULT_FRAMEWORK_PREFIXES: Tuple[str, ...] = (
    "builtins",
    "typing",
    "types",
    "collections",
    "abc",
    "datetime",
    "decimal",
    "uuid",
    "enum",
    "pathlib",
    "ipaddress",
    "pydantic",
    "fastapi",
    "starlette",
    "sqlalchemy",
)

DEFAULT_MAX_UNWRAP_DEPTH = 4
DEFAULT_SCHEMA = "dbo"
INTERNAL_TAG = "ApiMindmap"


@dataclass
class MindmapOptions:
    default_view: str = "mindmap"
    theme: str = "light"
    enable_export: bool = True
    title: str = "API Mindmap"
    enable_caching: bool = True
    enable_database_analyzer: bool = False
    max_unwrap_depth: int = DEFAULT_MAX_UNWRAP_DEPTH
    framework_prefixes: List[str] = field(default_factory=lambda: list(DEFAULT_FRAMEWORK_PREFIXES))
    default_schema: str = DEFAULT_SCHEMA

    def ui_settings(self) -> dict:
        """Settings the rendering front end reads from /api/mindmap/config."""
        data = asdict(self)
        for key in ("max_unwrap_depth", "framework_prefixes", "default_schema"):
            data.pop(key)
        return data


# -------------------------
# Environment parsing
# -------------------------

def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    logger.warning("Ignoring %s=%r: not a boolean", name, raw)
    return default


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return default
    if value < minimum:
        logger.warning("Ignoring %s=%r: must be >= %d", name, raw, minimum)
        return default
    return value


def _env_choice(name: str, default: str, choices: Tuple[str, ...]) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value not in choices:
        logger.warning("Ignoring %s=%r: expected one of %s", name, raw, ", ".join(choices))
        return default
    return value


def _env_list(name: str) -> Optional[List[str]]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return [item.strip() for item in raw.split(",") if item.strip()]


def load_options() -> MindmapOptions:
    defaults = MindmapOptions()
    return MindmapOptions(
        default_view=_env_choice("MINDMAP_DEFAULT_VIEW", defaults.default_view, VIEWS),
        theme=_env_choice("MINDMAP_THEME", defaults.theme, THEMES),
        enable_export=_env_bool("MINDMAP_ENABLE_EXPORT", defaults.enable_export),
        title=os.getenv("MINDMAP_TITLE", defaults.title),
        enable_caching=_env_bool("MINDMAP_ENABLE_CACHING", defaults.enable_caching),
        enable_database_analyzer=_env_bool(
            "MINDMAP_ENABLE_DATABASE_ANALYZER", defaults.enable_database_analyzer
        ),
        max_unwrap_depth=_env_int("MINDMAP_MAX_UNWRAP_DEPTH", defaults.max_unwrap_depth, minimum=1),
        framework_prefixes=_env_list("MINDMAP_FRAMEWORK_PREFIXES") or defaults.framework_prefixes,
        default_schema=os.getenv("MINDMAP_DEFAULT_SCHEMA", defaults.default_schema) or DEFAULT_SCHEMA,
    )


def load_log_level() -> str:
    return _env_choice("MINDMAP_LOG_LEVEL", "info", LOG_LEVELS).upper()


LOG_LEVEL = load_log_level()
