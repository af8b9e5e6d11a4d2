"""
app.py
======================

Gemini 生成トリビアクイズ（Streamlit）エントリーポイント。

特徴:
- 1 画面構成（読み込み中 / 問題なし / 出題 / 結果）
- 起動時とやり直し時に Gemini から問題セットを 1 回だけ取得
- 最初に選んだ選択肢だけを採点

前提:
- 環境変数 GEMINI_API_KEY が設定されていること（なくても起動はする）
- config.toml があれば読み込む（なければデフォルト設定）

起動:
    streamlit run app.py
"""

from __future__ import annotations

import asyncio
import logging

import streamlit as st

from trivia_quiz.config import AppConfig, load_app_config
from trivia_quiz.controller import SessionController
from trivia_quiz.ui import pick_theme, render_empty, render_loading, render_quiz_page


# ----------------------------------------------------------------------
#  アプリ設定 / ログ
# ----------------------------------------------------------------------
def get_app_config() -> AppConfig:
    """config.toml を 1 度だけ読み込み、セッションに保持する。"""
    if "app_config" not in st.session_state:
        config = load_app_config()
        setup_logging(config.log_level)
        st.session_state["app_config"] = config
    return st.session_state["app_config"]  # type: ignore[return-value]


def setup_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# ----------------------------------------------------------------------
#  SessionController のラッパー
# ----------------------------------------------------------------------
def get_controller() -> SessionController:
    """SessionController をセッションに保持して返す。"""
    if "controller" not in st.session_state:
        st.session_state["controller"] = SessionController(get_app_config())
    return st.session_state["controller"]  # type: ignore[return-value]


def load_questions(controller: SessionController, *, restart: bool = False) -> None:
    """問題セットを取得する。失敗しても例外は出ない（空セッションになる）。"""
    with render_loading():
        if restart:
            asyncio.run(controller.restart())
        else:
            asyncio.run(controller.request_new_session())
    st.session_state["loaded"] = True


# ----------------------------------------------------------------------
#  メイン
# ----------------------------------------------------------------------
def main() -> None:
    config = get_app_config()

    st.set_page_config(
        page_title=config.app_name,
        page_icon="🧠",
        layout="centered",
    )

    controller = get_controller()
    theme_key = pick_theme(config.theme)

    # 起動直後に 1 回だけ取得
    if not st.session_state.get("loaded"):
        load_questions(controller)

    session = controller.state

    if session.is_empty:
        if render_empty(theme_key):
            load_questions(controller, restart=True)
            st.rerun()
        return

    ui_result = render_quiz_page(session, app_name=config.app_name, theme_key=theme_key)

    if ui_result["selected_choice"] is not None:
        controller.select_answer(ui_result["selected_choice"])
        st.rerun()
    elif ui_result["clicked_next"]:
        controller.advance()
        st.rerun()
    elif ui_result["clicked_prev"]:
        controller.retreat()
        st.rerun()
    elif ui_result["clicked_restart"]:
        load_questions(controller, restart=True)
        st.rerun()


if __name__ == "__main__":
    main()
