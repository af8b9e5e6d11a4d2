"""
ui.py
======================

Streamlit ベースの UI コンポーネントをまとめたモジュール。

責務:
- 読み込み中 / 問題なし / 出題中 / 結果表示 の描画
- 問題文・選択肢・正誤の色分け
- ナビゲーションボタン（前へ / 次へ / もう一度）

ここでは「見た目」と「ユーザー操作の入力」だけを扱い、
状態の変更は app.py から SessionController を呼んで行う。

戻り値として「何が押されたか」「どの選択肢が新たに選ばれたか」を返す。
"""

from __future__ import annotations

import html
from typing import Any, Dict, Optional

import streamlit as st

from .models import SessionState

# ----------------------------------------------------------------------
#  テーマ定義
# ----------------------------------------------------------------------


THEMES: Dict[str, Dict[str, str]] = {
    "light": {
        "bg": "#ffffff",
        "text": "#333333",
        "surface": "#f5f6ff",
        "border": "#cccccc",
        "primary": "#111bff",
        "correct": "#a0e3a0",
        "incorrect": "#ffb3b3",
    },
    "dark": {
        "bg": "#000000",
        "text": "#f5f5f7",
        "surface": "#1c1c1e",
        "border": "#3a3a3c",
        "primary": "#0a84ff",
        "correct": "#30d158",
        "incorrect": "#ff453a",
    },
}


# ----------------------------------------------------------------------
#  CSS 生成
# ----------------------------------------------------------------------
def _generate_css(theme: Dict[str, str]) -> str:
    """テーマに応じたグローバル CSS を生成する。"""

    return f"""
    <style>
    .tq-title {{
        font-weight: 700;
        font-size: 1.4rem;
        color: {theme['primary']};
        text-align: center;
    }}

    .tq-progress {{
        font-size: 0.9rem;
        text-align: center;
        color: {theme['text']}aa;
        margin-bottom: 0.5rem;
    }}

    .tq-question-box {{
        background: {theme['surface']};
        padding: 1rem;
        border-radius: 12px;
        border: 1px solid {theme['border']};
        font-size: 1.1rem;
        line-height: 1.6;
        margin-bottom: 0.75rem;
    }}

    .tq-result {{
        padding: 0.5rem 0.9rem;
        border-radius: 10px;
        margin-bottom: 0.45rem;
        border: 1px solid {theme['border']};
    }}

    .tq-result-correct {{
        background: {theme['correct']};
    }}

    .tq-result-incorrect {{
        background: {theme['incorrect']};
    }}

    .tq-score {{
        font-size: 1.3rem;
        font-weight: 700;
        text-align: center;
        margin-top: 1rem;
    }}
    </style>
    """


def _apply_theme(theme_key: str) -> None:
    theme = THEMES.get(theme_key, THEMES["light"])
    st.markdown(_generate_css(theme), unsafe_allow_html=True)


# ----------------------------------------------------------------------
#  HTML 断片（Gemini の生成テキストは必ずエスケープする）
# ----------------------------------------------------------------------
def question_html(text: str) -> str:
    return f"<div class='tq-question-box'>{html.escape(text)}</div>"


def option_result_html(option: str, index: int, correct_option: int, selected: int) -> str:
    """解答後の選択肢 1 つ分。正解は緑、選んだ不正解は赤。"""
    classes = ["tq-result"]
    if index == correct_option:
        classes.append("tq-result-correct")
    elif index == selected:
        classes.append("tq-result-incorrect")
    mark = "👉 " if index == selected else ""
    class_attr = " ".join(classes)
    return f"<div class='{class_attr}'>{mark}{html.escape(option)}</div>"


# ----------------------------------------------------------------------
#  読み込み中 / 問題なし
# ----------------------------------------------------------------------
def render_loading():
    """読み込み中の表示。with 文で使う。"""
    return st.spinner("問題を読み込み中...")


def render_empty(theme_key: str = "light") -> bool:
    """
    問題が 0 問のときの画面。
    通信失敗・形式不正などの理由は区別せず同じ表示にする。
    「新しい問題を生成」が押されたら True。
    """
    _apply_theme(theme_key)
    st.info("利用できる問題がありません。")
    return st.button("🔄 新しい問題を生成", key="tq_retry", use_container_width=True)


# ----------------------------------------------------------------------
#  公開 API: クイズページの描画
# ----------------------------------------------------------------------
def render_quiz_page(
    session: SessionState,
    *,
    app_name: str = "Trivia Quiz",
    theme_key: str = "light",
) -> Dict[str, Any]:
    """
    出題画面全体を描画し、ユーザー操作の結果を返す。

    引数:
        session:
            models.SessionState のインスタンス（問題 1 問以上が前提）。
        app_name:
            画面上部のタイトル。
        theme_key:
            THEMES のキー。

    戻り値:
        {
          "selected_choice": Optional[int],   # 新たに押された選択肢 index (なければ None)
          "clicked_next": bool,
          "clicked_prev": bool,
          "clicked_restart": bool,
        }
    """
    result: Dict[str, Any] = {
        "selected_choice": None,
        "clicked_next": False,
        "clicked_prev": False,
        "clicked_restart": False,
    }

    q = session.current_question
    if q is None:
        st.error("問題がまだ読み込まれていません。")
        return result

    _apply_theme(theme_key)

    st.markdown(f"<div class='tq-title'>{html.escape(app_name)}</div>", unsafe_allow_html=True)
    st.markdown(
        f"<div class='tq-progress'>問題 {session.current_index + 1} / {len(session.questions)}</div>",
        unsafe_allow_html=True,
    )
    st.markdown(question_html(q.question), unsafe_allow_html=True)

    # ----------------------------------------
    # 選択肢
    # ----------------------------------------
    answered = session.is_answered()
    selected = session.selected_answers[session.current_index]

    for idx, option in enumerate(q.options):
        if answered:
            # 解答後はボタンではなく正誤の色付きで表示
            st.markdown(
                option_result_html(option, idx, q.correct_option, selected),
                unsafe_allow_html=True,
            )
        elif st.button(option, key=f"tq_choice_{idx}", use_container_width=True):
            result["selected_choice"] = idx

    # ----------------------------------------
    # ナビゲーション
    # ----------------------------------------
    col_prev, col_next = st.columns(2)
    with col_prev:
        result["clicked_prev"] = st.button(
            "⬅️ 前へ",
            key="tq_prev",
            disabled=not session.can_retreat,
            use_container_width=True,
        )
    with col_next:
        result["clicked_next"] = st.button(
            "次へ ➡️",
            key="tq_next",
            disabled=not session.can_advance,
            use_container_width=True,
        )

    # ----------------------------------------
    # 結果（最後の問題に解答済み）
    # ----------------------------------------
    if session.is_complete:
        result["clicked_restart"] = _render_score(session)

    return result


def _render_score(session: SessionState) -> bool:
    """スコアと「もう一度」ボタンを描画する。押されたら True。"""
    st.markdown(
        f"<div class='tq-score'>🏆 スコア: {session.score} / {len(session.questions)}</div>",
        unsafe_allow_html=True,
    )
    return st.button("🔄 もう一度", key="tq_restart", use_container_width=True)


def pick_theme(requested: Optional[str]) -> str:
    """未知のテーマ名は light にする。"""
    if requested in THEMES:
        return requested  # type: ignore[return-value]
    return "light"
