"""
gemini_client.py
======================

Google Gemini API への問題セット生成リクエストを扱うモジュール。

要件:
- プロンプトと「問題オブジェクトの配列」を強制する出力スキーマを送る
- 応答の candidates[0].content.parts[0].text を取り出す（なければ "[]"）
- その文字列を JSON として解析し Question のリストにする
- 失敗はすべて QuestionSetError のサブクラスとして送出する
  （空セッションへの変換は controller 側で行う）

リクエストは 1 回につき 1 度だけ送り、リトライもタイムアウト指定もしない。
"""

from __future__ import annotations

import copy
import json
import logging
from typing import Any, Callable, Dict, List, Optional

import google.generativeai as genai
from google.api_core.exceptions import GoogleAPIError, ResourceExhausted

from .config import API_KEY_ENV, AppConfig
from .models import FailureKind, Question

logger = logging.getLogger(__name__)

# 応答に問題配列が無いときに使う文字列
EMPTY_QUESTION_SET_TEXT = "[]"

RESPONSE_MIME_TYPE = "application/json"

QUESTION_SET_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "question": {"type": "string"},
            "options": {
                "type": "array",
                "items": {"type": "string"},
            },
            "correctOption": {"type": "number"},
        },
        "required": ["question", "options", "correctOption"],
    },
}


# ----------------------------------------------------------------------
#  例外
# ----------------------------------------------------------------------
class QuestionSetError(Exception):
    """問題セットを取得できなかったことを表す基底例外。"""

    kind: FailureKind = FailureKind.TRANSPORT


class TransportError(QuestionSetError):
    """通信・API エラー（非 2xx を含む）。"""

    kind = FailureKind.TRANSPORT


class RateLimitedError(TransportError):
    """429 Resource Exhausted。"""

    kind = FailureKind.RATE_LIMITED


class MalformedResponseError(QuestionSetError):
    """応答テキストが JSON として読めない。"""

    kind = FailureKind.MALFORMED_JSON


class ShapeError(QuestionSetError):
    """JSON ではあるが問題配列の形をしていない。"""

    kind = FailureKind.SHAPE


# ----------------------------------------------------------------------
#  リクエスト構築
# ----------------------------------------------------------------------
def build_generation_config() -> Dict[str, Any]:
    """SDK に渡す generation_config。スキーマは SDK 側で書き換えられるのでコピーを渡す。"""
    return {
        "response_mime_type": RESPONSE_MIME_TYPE,
        "response_schema": copy.deepcopy(QUESTION_SET_SCHEMA),
    }


def build_request_body(prompt_text: str) -> Dict[str, Any]:
    """
    REST の generateContent に送られる本文と同じ形の dict を返す。
    デバッグログ出力用。
    """
    return {
        "contents": [
            {
                "parts": [{"text": prompt_text}],
            }
        ],
        "generationConfig": {
            "responseMimeType": RESPONSE_MIME_TYPE,
            "responseJsonSchema": copy.deepcopy(QUESTION_SET_SCHEMA),
        },
    }


# ----------------------------------------------------------------------
#  応答の解析
# ----------------------------------------------------------------------
def _dig(obj: Any, key: str) -> Any:
    """dict でも SDK のオブジェクトでも key を取り出す。無ければ None。"""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


def _first(seq: Any) -> Any:
    try:
        return seq[0] if seq else None
    except (TypeError, IndexError, KeyError):
        return None


def extract_text(response: Any) -> str:
    """
    candidates[0].content.parts[0].text を返す。
    途中のどこかが欠けていれば "[]"（= 0 問）。
    proto の文字列フィールドは未設定でも "" になるので、空白だけの text も欠けている扱い。
    """
    candidate = _first(_dig(response, "candidates"))
    part = _first(_dig(_dig(candidate, "content"), "parts"))
    text = _dig(part, "text")
    if not isinstance(text, str) or not text.strip():
        return EMPTY_QUESTION_SET_TEXT
    return text


def parse_question_set(text: str) -> List[Question]:
    """
    問題配列の JSON 文字列を Question のリストにする。

    - JSON として読めない → MalformedResponseError
    - 配列でない / 要素が問題の形でない → ShapeError
    1 問でも壊れていればセット全体を捨てる。
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f"応答が JSON ではありません: {e}") from e

    if not isinstance(data, list):
        raise ShapeError(f"応答が配列ではありません: {type(data).__name__}")

    questions: List[Question] = []
    for i, item in enumerate(data):
        try:
            questions.append(Question.from_dict(item))
        except ValueError as e:
            raise ShapeError(f"{i} 番目の問題が不正です: {e}") from e
    return questions


# ----------------------------------------------------------------------
#  クライアント
# ----------------------------------------------------------------------
ModelFactory = Callable[[str, str], Any]


def default_model_factory(model_name: str, api_key: str) -> Any:
    """APIキーを設定して GenerativeModel を作る。"""
    genai.configure(api_key=api_key)
    return genai.GenerativeModel(model_name)


class GeminiQuizClient:
    """
    問題セット生成クライアント。

    主な機能:
    - fetch_questions(): プロンプトを送り Question のリストを返す
    """

    def __init__(
        self,
        config: AppConfig,
        model_factory: Optional[ModelFactory] = None,
    ):
        self.config = config
        self._model_factory = model_factory or default_model_factory

    async def fetch_questions(self, prompt_text: str) -> List[Question]:
        """
        generateContent を 1 回呼び、問題セットを返す。
        失敗時は QuestionSetError のサブクラスを送出する。
        """
        # APIキーはリクエストごとに読み直す
        api_key = self.config.load_api_key()
        if not api_key:
            logger.warning("%s が未設定のままリクエストします。", API_KEY_ENV)

        logger.debug(
            "Gemini リクエスト (%s): %s",
            self.config.model_name,
            json.dumps(build_request_body(prompt_text), ensure_ascii=False),
        )

        try:
            model = self._model_factory(self.config.model_name, api_key)
            response = await model.generate_content_async(
                prompt_text,
                generation_config=build_generation_config(),
            )
        except ResourceExhausted as e:
            raise RateLimitedError(str(e)) from e
        except GoogleAPIError as e:
            raise TransportError(str(e)) from e
        except Exception as e:
            # SDK 内部・認証・ネットワーク層の例外もまとめて通信失敗扱い
            raise TransportError(f"{type(e).__name__}: {e}") from e

        text = extract_text(response)
        questions = parse_question_set(text)
        logger.info("Gemini から %d 問を受け取りました。", len(questions))
        return questions
