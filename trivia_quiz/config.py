"""
config.py
=========

アプリ全体で利用する設定値を一元管理する。
Streamlit、Gemini API、出題プロンプトなどはすべてこのクラスを通じて取得する。

APIキーだけは config.toml に書かず、環境変数 GEMINI_API_KEY
（なければルートの .env）から毎リクエスト読み直す。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import toml

logger = logging.getLogger(__name__)


# ------------------------------------------------------------
# 基本パス定義
# ------------------------------------------------------------

ROOT_DIR = Path(__file__).resolve().parent.parent
CONFIG_PATH = ROOT_DIR / "config.toml"
ENV_PATH = ROOT_DIR / ".env"

API_KEY_ENV = "GEMINI_API_KEY"

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_PROMPT = "Lista de 5 preguntas de cultura general de Colombia"


# ------------------------------------------------------------
# AppConfig
# ------------------------------------------------------------

@dataclass
class AppConfig:
    """
    アプリ設定クラス。

    - アプリ名 / テーマ / ログレベル
    - Gemini のモデル名
    - 出題プロンプト
    - APIキーの読み取り
    """

    # ---------- アプリ ----------
    app_name: str = "Trivia Quiz"
    theme: str = "light"
    log_level: str = "INFO"

    # ---------- Gemini ----------
    model_name: str = DEFAULT_MODEL

    # ---------- 出題 ----------
    prompt: str = DEFAULT_PROMPT

    # ---------- APIキー探索先 ----------
    env_path: Path = ENV_PATH

    # ============================================================
    # 生成
    # ============================================================

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "AppConfig":
        """
        config.toml を読み込んだ dict から生成する。
        知らないキーや型の合わない値は無視してデフォルトを使う。
        """
        app = _section(cfg, "app")
        gemini = _section(cfg, "gemini")
        quiz = _section(cfg, "quiz")
        log = _section(cfg, "logging")

        config = cls()
        config.app_name = _str_or(app.get("name"), config.app_name)
        config.theme = _str_or(app.get("theme"), config.theme)
        config.model_name = _str_or(gemini.get("model"), config.model_name)
        config.prompt = _str_or(quiz.get("prompt"), config.prompt)
        config.log_level = _str_or(log.get("level"), config.log_level).upper()
        return config

    # ============================================================
    # APIキー
    # ============================================================

    def load_api_key(self) -> str:
        """
        リクエストごとに呼ばれる。
        環境変数 → .env の順に探し、なければ空文字を返す
        （ここでは検証せず、そのまま送ってエンドポイント側に弾かせる）。
        """
        key = os.environ.get(API_KEY_ENV)
        if key:
            return key

        if self.env_path.exists():
            for line in self.env_path.read_text(encoding="utf-8").splitlines():
                if line.startswith(f"{API_KEY_ENV}="):
                    return line.split("=", 1)[1].strip().strip('"').strip("'")

        return ""


# ------------------------------------------------------------
# config.toml 読み込み
# ------------------------------------------------------------

def load_app_config(path: Optional[Path] = None) -> AppConfig:
    """
    config.toml を読み込んで AppConfig を返す。
    ファイルが無い、または壊れている場合はデフォルト設定。
    """
    path = CONFIG_PATH if path is None else Path(path)

    if not path.exists():
        logger.info("config.toml がないためデフォルト設定を使用します: %s", path)
        return AppConfig()

    try:
        cfg = toml.load(path)
    except (toml.TomlDecodeError, OSError) as e:
        logger.warning("config.toml を読み込めませんでした (%s): %s", path, e)
        return AppConfig()

    return AppConfig.from_dict(cfg)


def _section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = cfg.get(name)
    return value if isinstance(value, dict) else {}


def _str_or(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default
