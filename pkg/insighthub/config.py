# InsightHub configuration
# Override paths and server settings via config.yaml, env vars, or CLI args.

import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field, fields
from typing import List, Optional

CONFIG_PATH = Path(__file__).resolve().parent.parent.parent / "config.yaml"


@dataclass
class Config:
    """Runtime configuration for the InsightHub server."""

    # Storage
    data_path: str = "~/.local/share/insighthub/data.json"

    # HTTP
    host: str = "127.0.0.1"
    port: int = 3000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    # Dashboard page (empty = insighthub_ui.html next to the server)
    ui_file: str = ""

    log_level: str = "INFO"

    def resolve_paths(self):
        """Apply INSIGHTHUB_DATA and expand ~."""
        env = os.environ.get("INSIGHTHUB_DATA")
        if env:
            self.data_path = env
        self.data_path = str(Path(self.data_path).expanduser())
        if self.ui_file:
            self.ui_file = str(Path(self.ui_file).expanduser())

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Load config from YAML file, falling back to defaults."""
        if path is None:
            path = os.environ.get("INSIGHTHUB_CONFIG")
        cfg_path = Path(path) if path else CONFIG_PATH
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
                known = {fld.name for fld in fields(cls)}
                cfg = cls(**{k: v for k, v in data.items() if k in known})
            except Exception:
                cfg = cls()
        else:
            cfg = cls()
        cfg.resolve_paths()
        return cfg
