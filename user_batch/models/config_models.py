from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the user batch tool.

The loader in user_batch/config/loader.py builds these from config/app.yml.
"""

__all__ = [
    "DEFAULT_ALIASES",
    "DatabaseConfig",
    "AppConfig",
]

# 正規フィールド -> 受け付ける列名 (優先順)
DEFAULT_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("name", "Name"),
    "age": ("age", "Age"),
    "birth": ("birth", "Birth", "Birth Date"),
}


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration.

    Used as fallback when environment variables are not set.
    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object."""
    table: str = "users"
    notice_ttl_seconds: float = 3.0  # 通知の自動消去までの秒数
    page_size: int = 1000  # execute_values page_size
    error_log_dir: str = "./logs"
    aliases: dict[str, tuple[str, ...]] = field(default_factory=lambda: dict(DEFAULT_ALIASES))
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
