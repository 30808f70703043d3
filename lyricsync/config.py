from __future__ import annotations

import json
from dataclasses import dataclass
import os
from pathlib import Path

DEFAULT_TOKEN_URL = "https://open.spotify.com/get_access_token?reason=transport&productType=web_player"
DEFAULT_SEARCH_URL = "https://api.spotify.com/v1/search"
DEFAULT_LYRICS_URL = "https://spclient.wg.spotify.com/color-lyrics/v2/track"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/101.0.0.0 Safari/537.36"
)
APP_PLATFORM = "WebPlayer"


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "lyricsync"
    return Path.home() / ".config" / "lyricsync"


def _config_file() -> Path:
    return _config_dir() / "config.json"


@dataclass(frozen=True)
class AppConfig:
    config_dir: Path

    # Credentials
    sp_dc: str

    # Endpoints
    token_url: str
    search_url: str
    lyrics_url: str
    user_agent: str
    app_platform: str
    http_timeout_s: float

    # Sync
    tick_interval_s: float

    # Rendering
    context_lines: int  # lines above/below current
    use_alt_screen: bool


def load_config() -> AppConfig:
    config_dir = _config_dir()
    use_alt_screen = os.getenv("LYRICSYNC_ALT_SCREEN", "1") not in ("0", "false", "False")

    return AppConfig(
        config_dir=config_dir,
        sp_dc=_load_sp_dc(config_dir),
        token_url=os.getenv("LYRICSYNC_TOKEN_URL", DEFAULT_TOKEN_URL),
        search_url=os.getenv("LYRICSYNC_SEARCH_URL", DEFAULT_SEARCH_URL),
        lyrics_url=os.getenv("LYRICSYNC_LYRICS_URL", DEFAULT_LYRICS_URL).rstrip("/"),
        user_agent=os.getenv("LYRICSYNC_USER_AGENT", DEFAULT_USER_AGENT),
        app_platform=APP_PLATFORM,
        http_timeout_s=float(os.getenv("LYRICSYNC_HTTP_TIMEOUT", "10.0")),
        tick_interval_s=float(os.getenv("LYRICSYNC_TICK_INTERVAL", "0.5")),
        context_lines=int(os.getenv("LYRICSYNC_CONTEXT_LINES", "2")),
        use_alt_screen=use_alt_screen,
    )


def _read_config_json(cfg_path: Path) -> dict[str, str]:
    if not cfg_path.exists():
        return {}
    try:
        data = json.loads(cfg_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _load_sp_dc(config_dir: Path) -> str:
    # Priority: config.json → LYRICSYNC_SP_DC → ""
    raw = _read_config_json(config_dir / "config.json").get("sp_dc")
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return (os.getenv("LYRICSYNC_SP_DC") or "").strip()


def save_config_credential(sp_dc: str) -> Path:
    cfg_path = _config_file()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    data = _read_config_json(cfg_path)
    data["sp_dc"] = sp_dc.strip()
    cfg_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return cfg_path
