"""
config.py — Runtime settings
=============================
Everything configurable comes from environment variables so the same
code runs locally and behind a hosting provider:

    PORT                 listen port                      (3001)
    HOST                 bind address                     (127.0.0.1)
    DATABASE_PATH        SQLite file for saved runs       (visualizations.db)
    LOG_LEVEL            DEBUG / INFO / WARNING / ERROR   (INFO)
    CORS_ORIGINS         comma-separated allowed origins  (http://localhost:3000)
    MAX_CONTENT_LENGTH   request body limit in bytes      (262144)
    SECRET_KEY           Flask session key                (random per process)
    MAX_SESSIONS         replay sessions kept in memory   (256)
"""

import os
import secrets
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional


@dataclass
class Settings:
    host:               str       = "127.0.0.1"
    port:               int       = 3001
    database_path:      str       = "visualizations.db"
    log_level:          str       = "INFO"
    cors_origins:       List[str] = field(default_factory=lambda: ["http://localhost:3000"])
    max_content_length: int       = 256 * 1024
    secret_key:         str       = field(default_factory=lambda: secrets.token_hex(32))
    max_sessions:       int       = 256
    testing:            bool      = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        defaults = cls()
        origins = env.get("CORS_ORIGINS")
        return cls(
            host=env.get("HOST", defaults.host),
            port=int(env.get("PORT", defaults.port)),
            database_path=env.get("DATABASE_PATH", defaults.database_path),
            log_level=env.get("LOG_LEVEL", defaults.log_level),
            cors_origins=(
                [o.strip() for o in origins.split(",") if o.strip()]
                if origins is not None else defaults.cors_origins
            ),
            max_content_length=int(env.get("MAX_CONTENT_LENGTH", defaults.max_content_length)),
            secret_key=env.get("SECRET_KEY") or defaults.secret_key,
            max_sessions=int(env.get("MAX_SESSIONS", defaults.max_sessions)),
        )

    def flask_config(self) -> Dict[str, object]:
        return {
            "SECRET_KEY":         self.secret_key,
            "MAX_CONTENT_LENGTH": self.max_content_length,
            "TESTING":            self.testing,
        }
