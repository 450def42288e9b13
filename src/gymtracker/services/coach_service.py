"""Coach text generation: motivational quotes and progress commentary.

Text comes from an LLM and is purely cosmetic. Every failure (missing key,
network, quota, empty reply) is logged and replaced with a fixed fallback
line, so callers never need to handle errors from this module.
"""
import json
import logging
from typing import Any, List, Optional, Sequence

from gymtracker.ai import AIClientFactory, AIRequestContext, retry_sync_call
from gymtracker.config import settings
from gymtracker.models import TRAINING_ORDER, Workout, to_iso


logger = logging.getLogger(__name__)

# Number of recent sessions sent with the quote prompt
QUOTE_HISTORY_SIZE = 5

NO_HISTORY_QUOTE = "準備好開始你嘅第一場訓練未？"
EMPTY_QUOTE_FALLBACK = "加油，今日都要爆汗！"
QUOTE_ERROR_FALLBACK = "保持規律，進步就在眼前！"
NO_DATA_ANALYSIS = "暫時未有足夠數據進行詳細分析。"
ANALYSIS_ERROR_FALLBACK = "分析過程中出現錯誤，請稍後再試。"

_ORDER_TEXT = "、".join(group.label for group in TRAINING_ORDER)

QUOTE_PROMPT = """以下是用戶最近的健身紀錄：
{history}

根據這些紀錄，請提供一句簡短且具激勵性的廣東話健身建議（約30字以內）。
用戶目前的訓練次序是：{order}。
如果用戶有進步，請給予肯定。"""

ANALYSIS_PROMPT = """你是專業的健身教練。請分析以下用戶的健身歷史數據：
{history}

要求：
1. 分析重量變化趨勢。
2. 分析總訓練容量 (Volume = Weight * Reps) 的進度。
3. 給予專業且詳細的廣東話建議，指出哪些動作有進步，哪些需要加強。
4. 格式：請以 Markdown 列表形式回覆，保持語氣專業且富有鼓勵性。
5. 使用廣東話口語（例如：仲可以加重、做得好、爆肌）。"""


def history_to_prompt_json(history: Sequence[Workout]) -> str:
    """Compact JSON of the workouts, without ids."""
    payload = [
        {
            "date": to_iso(w.date),
            "muscleGroup": w.muscle_group.label,
            "exercises": [
                {
                    "name": ex.name,
                    "sets": [{"weight": s.weight, "reps": s.reps} for s in ex.sets],
                }
                for ex in w.exercises
            ],
        }
        for w in history
    ]
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def most_recent(history: Sequence[Workout], count: int) -> List[Workout]:
    """The `count` latest workouts, most recent first."""
    ordered = sorted(history, key=lambda w: w.date, reverse=True)
    return ordered[:count]


class CoachService:
    """Generates short coaching text from workout history."""

    def __init__(
        self,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        client_factory: Any = AIClientFactory,
        max_attempts: int = 2,
    ):
        self.provider = (provider or settings.AI_PROVIDER).lower()
        if model:
            self.model = model
        elif self.provider == "anthropic":
            self.model = settings.ANTHROPIC_MODEL
        else:
            self.model = settings.OPENAI_MODEL
        self.client_factory = client_factory
        self.max_attempts = max_attempts

    def motivational_quote(self, history: Sequence[Workout]) -> str:
        """One-line encouragement based on the latest sessions."""
        if not history:
            return NO_HISTORY_QUOTE

        prompt = QUOTE_PROMPT.format(
            history=history_to_prompt_json(most_recent(history, QUOTE_HISTORY_SIZE)),
            order=_ORDER_TEXT,
        )
        try:
            text = self.complete(prompt, feature_name="coach_quote", max_tokens=200)
        except Exception as e:
            logger.error(f"Coach quote generation failed: {e}")
            return QUOTE_ERROR_FALLBACK
        return text or EMPTY_QUOTE_FALLBACK

    def progress_analysis(self, history: Sequence[Workout]) -> str:
        """Markdown commentary on weight and volume progress."""
        if not history:
            return NO_DATA_ANALYSIS

        logger.debug(f"Requesting progress analysis for {len(history)} workouts")
        prompt = ANALYSIS_PROMPT.format(history=history_to_prompt_json(most_recent(history, len(history))))
        try:
            text = self.complete(prompt, feature_name="coach_analysis", max_tokens=1500)
        except Exception as e:
            logger.error(f"Progress analysis generation failed: {e}")
            return ANALYSIS_ERROR_FALLBACK
        return text or NO_DATA_ANALYSIS

    def complete(self, prompt: str, feature_name: str, max_tokens: int = 512) -> str:
        """
        Send a single-turn prompt to the configured provider.

        Returns:
            The stripped completion text ("" when the reply is empty)

        Raises:
            ValueError: Unknown provider or missing API key
            Exception: Provider errors once retries are exhausted
        """
        context = AIRequestContext(
            feature_name=feature_name,
            custom_properties={"model": self.model},
        )

        if self.provider == "openai":
            client = self.client_factory.create_openai_client(context=context)

            def _make_api_call() -> str:
                response = client.chat.completions.create(
                    model=self.model,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=0.8,
                    max_tokens=max_tokens,
                )
                return response.choices[0].message.content or ""

        elif self.provider == "anthropic":
            client = self.client_factory.create_anthropic_client(context=context)

            def _make_api_call() -> str:
                message = client.messages.create(
                    model=self.model,
                    max_tokens=max_tokens,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=0.8,
                )
                return "".join(
                    getattr(block, "text", "") for block in message.content
                )

        else:
            raise ValueError(f"Unknown LLM provider: {self.provider}. Use 'openai' or 'anthropic'.")

        text = retry_sync_call(_make_api_call, max_attempts=self.max_attempts)
        return text.strip()
