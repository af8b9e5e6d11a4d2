"""
models.py
======================

クイズの問題とセッション状態を表すデータモデル。

- Question: Gemini が返す 1 問分（問題文・選択肢・正解 index）
- SessionState: 1 セッション分の問題セットと解答の進捗

SessionState の不変条件:
- len(selected_answers) == len(questions)
- 各要素は UNANSWERED か、対応する問題の選択肢 index
- 0 <= current_index < max(len(questions), 1)
- score は「正解と一致する解答」の個数
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

# 未解答を表す番兵値
UNANSWERED = -1


class FailureKind(str, Enum):
    """セッションが空になった理由（UI には区別して見せない）。"""

    TRANSPORT = "transport"
    RATE_LIMITED = "rate_limited"
    MALFORMED_JSON = "malformed_json"
    SHAPE = "shape"


# ----------------------------------------------------------------------
#  Question
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class Question:
    """四択（とは限らない）問題 1 問。"""

    question: str
    options: List[str]
    correct_option: int

    def __post_init__(self) -> None:
        if len(self.options) < 2:
            raise ValueError(f"選択肢は 2 つ以上必要です: {len(self.options)}")
        if not 0 <= self.correct_option < len(self.options):
            raise ValueError(
                f"correct_option が範囲外です: {self.correct_option} "
                f"(選択肢 {len(self.options)} 個)"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Question":
        """
        Gemini の JSON 1 要素 {question, options, correctOption} から生成する。
        形式が合わない場合は ValueError。
        """
        if not isinstance(data, dict):
            raise ValueError(f"問題がオブジェクトではありません: {type(data).__name__}")

        text = data.get("question")
        options = data.get("options")
        correct = data.get("correctOption")

        if not isinstance(text, str) or not text.strip():
            raise ValueError("question が空、または文字列ではありません")
        if not isinstance(options, list) or not all(isinstance(o, str) for o in options):
            raise ValueError("options が文字列の配列ではありません")

        # JSON の number は 1.0 のように float で届くこともある
        if isinstance(correct, bool) or not isinstance(correct, (int, float)):
            raise ValueError(f"correctOption が数値ではありません: {correct!r}")
        if isinstance(correct, float):
            if not correct.is_integer():
                raise ValueError(f"correctOption が整数ではありません: {correct!r}")
            correct = int(correct)

        return cls(question=text.strip(), options=list(options), correct_option=correct)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "question": self.question,
            "options": list(self.options),
            "correctOption": self.correct_option,
        }


# ----------------------------------------------------------------------
#  SessionState
# ----------------------------------------------------------------------
@dataclass
class SessionState:
    """
    1 セッション分の状態。

    新しい問題セットが届いたときはフィールド単位で書き換えず、
    from_questions() / empty() で丸ごと作り直す。
    """

    questions: List[Question] = field(default_factory=list)
    selected_answers: List[int] = field(default_factory=list)
    current_index: int = 0
    score: int = 0
    is_loading: bool = False
    failure: Optional[FailureKind] = None

    @classmethod
    def from_questions(cls, questions: List[Question]) -> "SessionState":
        return cls(
            questions=list(questions),
            selected_answers=[UNANSWERED] * len(questions),
        )

    @classmethod
    def empty(cls, failure: Optional[FailureKind] = None) -> "SessionState":
        return cls(failure=failure)

    # ------------------------------------------------------------
    # 派生プロパティ（UI 用）
    # ------------------------------------------------------------
    @property
    def is_empty(self) -> bool:
        return not self.questions

    @property
    def current_question(self) -> Optional[Question]:
        if self.is_empty:
            return None
        return self.questions[self.current_index]

    def is_answered(self, index: Optional[int] = None) -> bool:
        """index の問題が解答済みか。省略時は現在の問題。"""
        if self.is_empty:
            return False
        i = self.current_index if index is None else index
        return self.selected_answers[i] != UNANSWERED

    @property
    def answered_count(self) -> int:
        return sum(1 for a in self.selected_answers if a != UNANSWERED)

    @property
    def can_retreat(self) -> bool:
        return self.current_index > 0

    @property
    def can_advance(self) -> bool:
        return self.current_index < len(self.questions) - 1

    @property
    def is_complete(self) -> bool:
        """最後の問題まで進み、かつ解答済みならスコア表示。"""
        return (
            not self.is_empty
            and self.current_index == len(self.questions) - 1
            and self.is_answered()
        )

    # ------------------------------------------------------------
    # 解答の遷移: Unanswered -> Answered(option_index)
    # ------------------------------------------------------------
    def commit_answer(self, index: int, option_index: int) -> bool:
        """
        index の問題に option_index を記録する。

        一度記録した解答は変更できない（最初の選択のみ有効）。
        記録した場合 True、無視した場合 False を返す。
        正解なら score を 1 加算する。
        """
        if not 0 <= index < len(self.questions):
            return False
        if self.selected_answers[index] != UNANSWERED:
            return False

        question = self.questions[index]
        if not 0 <= option_index < len(question.options):
            return False

        self.selected_answers[index] = option_index
        if option_index == question.correct_option:
            self.score += 1
        return True

