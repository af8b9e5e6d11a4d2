"""
trivia_quiz パッケージ
======================

このパッケージは、Gemini 生成トリビアクイズアプリの内部ロジックを提供する。

主な役割:
- 設定管理（config）
- 問題・セッション状態のデータモデル（models）
- Gemini API への問題セット生成リクエスト（gemini_client）
- セッションの進行と採点（controller）
- UI コンポーネント（ui）

app.py は Streamlit の画面遷移のみを担当し、内部ロジックはすべて本パッケージから呼ぶ。
"""

from .config import AppConfig, load_app_config
from .models import UNANSWERED, FailureKind, Question, SessionState
from .gemini_client import (
    GeminiQuizClient,
    QuestionSetError,
    TransportError,
    RateLimitedError,
    MalformedResponseError,
    ShapeError,
)
from .controller import SessionController

__all__ = [
    "AppConfig",
    "load_app_config",
    "UNANSWERED",
    "FailureKind",
    "Question",
    "SessionState",
    "GeminiQuizClient",
    "QuestionSetError",
    "TransportError",
    "RateLimitedError",
    "MalformedResponseError",
    "ShapeError",
    "SessionController",
]
