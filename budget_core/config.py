"""Runtime settings read from ``FINANCE_TRACKER_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional, Tuple

ENV_PREFIX = "FINANCE_TRACKER_"


@dataclass(frozen=True)
class Settings:
    data_dir: Path = Path("data")
    snapshot_name: str = "finance_data.json"
    csv_name: str = "transactions.csv"
    log_level: str = "WARNING"
    environment: str = "prod"
    allowed_origins: Tuple[str, ...] = ()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        def read(name: str, default: str) -> str:
            value = env.get(ENV_PREFIX + name)
            return value.strip() if value and value.strip() else default

        origins = env.get(ENV_PREFIX + "ALLOWED_ORIGINS", "")
        return cls(
            data_dir=Path(read("DATA_DIR", "data")).expanduser(),
            snapshot_name=read("SNAPSHOT", cls.snapshot_name),
            csv_name=read("CSV", cls.csv_name),
            log_level=read("LOG_LEVEL", cls.log_level).upper(),
            environment=read("ENV", cls.environment).lower(),
            allowed_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        )

    def with_overrides(self, **changes: object) -> "Settings":
        """Apply non-None overrides, typically parsed command-line flags."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @property
    def snapshot_path(self) -> Path:
        return self.data_dir / self.snapshot_name

    @property
    def csv_path(self) -> Path:
        return self.data_dir / self.csv_name

    @property
    def is_development(self) -> bool:
        return self.environment in {"dev", "development"}
