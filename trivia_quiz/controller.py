"""
controller.py
======================

1 画面クイズのセッションコントローラ。

責務:
- SessionState の保持（UI からはこのクラス経由でのみ変更する）
- Gemini への問題セット生成リクエスト
- 解答の選択 / 前後の移動 / やり直し

失敗時の方針:
request_new_session() は例外を外に出さない。通信失敗・JSON 不正・形式不正は
すべて「問題 0 問のセッション」に変換し、理由だけ SessionState.failure に残す。
UI は常に描画できる状態を持つ。

同時リクエスト:
request_new_session() ごとに世代トークンを振り、最新のトークンの応答だけを
反映する。古いリクエストの応答は捨てる（リクエスト自体は止めない）。
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .config import AppConfig
from .gemini_client import GeminiQuizClient, QuestionSetError
from .models import FailureKind, Question, SessionState

logger = logging.getLogger(__name__)


class SessionController:
    """
    クイズのセッション管理クラス。

    主な機能:
    - request_new_session(): 問題セットを取得してセッションを作り直す
    - select_answer(): 現在の問題に解答する（最初の 1 回のみ有効）
    - advance() / retreat(): 前後の問題へ移動
    - restart(): 同じプロンプトで取り直す
    """

    def __init__(
        self,
        config: AppConfig,
        client: Optional[GeminiQuizClient] = None,
    ):
        self.config = config
        self.client = client or GeminiQuizClient(config)
        self.state = SessionState()
        self.prompt_text: str = config.prompt
        self._generation = 0

    # ------------------------------------------------------------
    # 問題セットの取得
    # ------------------------------------------------------------
    async def request_new_session(self, prompt_text: Optional[str] = None) -> SessionState:
        """
        prompt_text で問題セットを生成し、セッションを丸ごと置き換える。
        省略時は前回（初回は設定ファイル）のプロンプトを使う。

        失敗しても例外は送出せず、空のセッションになる。
        戻り値はこの呼び出しの後の self.state。
        """
        if prompt_text is not None:
            if not prompt_text.strip():
                raise ValueError("prompt_text が空です")
            self.prompt_text = prompt_text

        self._generation += 1
        token = self._generation
        self.state.is_loading = True

        questions: List[Question] = []
        failure: Optional[FailureKind] = None
        try:
            questions = await self.client.fetch_questions(self.prompt_text)
        except QuestionSetError as e:
            failure = e.kind
            logger.error("問題セットを取得できませんでした (%s): %s", e.kind.value, e)
        except Exception:
            failure = FailureKind.TRANSPORT
            logger.exception("問題セット取得中に予期しないエラーが発生しました")

        if token != self._generation:
            # 後から出したリクエストがある → この応答は捨てる
            logger.debug("古いリクエスト (#%d) の応答を破棄しました", token)
            return self.state

        if failure is not None:
            self.state = SessionState.empty(failure)
        else:
            self.state = SessionState.from_questions(questions)
        return self.state

    async def restart(self) -> SessionState:
        """同じプロンプトで取り直す。これまでの進捗は破棄する。"""
        logger.info("セッションをやり直します")
        return await self.request_new_session()

    # ------------------------------------------------------------
    # 解答
    # ------------------------------------------------------------
    def select_answer(self, option_index: int) -> bool:
        """
        現在の問題に option_index を記録する。

        解答済みの問題・範囲外の index・空セッションでは何もしない。
        記録した場合 True。
        """
        committed = self.state.commit_answer(self.state.current_index, option_index)
        if committed:
            logger.debug(
                "問題 %d に %d を解答 (score=%d)",
                self.state.current_index,
                option_index,
                self.state.score,
            )
        return committed

    # ------------------------------------------------------------
    # ナビゲーション
    # ------------------------------------------------------------
    def advance(self) -> None:
        if self.state.can_advance:
            self.state.current_index += 1

    def retreat(self) -> None:
        if self.state.can_retreat:
            self.state.current_index -= 1
