"""
Scorer Pipeline
===============
Post-hoc evaluation of a finished agent run.

Each scorer runs up to four stages:
    preprocess -> analyze -> generate_score -> generate_reason

`analyze` is where LLM-judged scorers call their judge model with a fixed
output schema; deterministic scorers skip it. Scorers never change the run
they grade.
"""
import logging
import random
from dataclasses import dataclass
from typing import Any

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import BaseModel, Field

from mailverifier.models import resolve_chat_model


logger = logging.getLogger(__name__)


# ============================================================
# Run & Result Objects
# ============================================================

class ScoringRun(BaseModel):
    """A completed agent run as seen by scorers."""
    input_messages: list[dict[str, Any]] = Field(default_factory=list)
    output_messages: list[dict[str, Any]] = Field(default_factory=list)
    tool_calls: list[dict[str, Any]] = Field(default_factory=list)

    @property
    def user_text(self) -> str:
        if not self.input_messages:
            return ""
        return str(self.input_messages[0].get("content") or "")

    @property
    def assistant_text(self) -> str:
        if not self.output_messages:
            return ""
        return str(self.output_messages[0].get("content") or "")

    @property
    def tool_names(self) -> list[str]:
        return [tc.get("toolName", "") for tc in self.tool_calls]


class ScoreResult(BaseModel):
    scorer: str
    score: float
    reason: str | None = None
    preprocess_result: dict[str, Any] = Field(default_factory=dict)
    analyze_result: dict[str, Any] = Field(default_factory=dict)


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


# ============================================================
# Scorers
# ============================================================

class Scorer:
    """Deterministic scorer; subclasses override the stages they need."""

    name: str = "scorer"
    description: str = ""

    def preprocess(self, run: ScoringRun) -> dict[str, Any]:
        return {"user_text": run.user_text, "assistant_text": run.assistant_text}

    async def analyze(self, run: ScoringRun, preprocessed: dict[str, Any]) -> dict[str, Any]:
        return {}

    def generate_score(self, results: dict[str, Any]) -> float:
        raise NotImplementedError

    def generate_reason(self, results: dict[str, Any], score: float) -> str | None:
        return None

    async def run(self, run: ScoringRun) -> ScoreResult:
        preprocessed = self.preprocess(run)
        analysis = await self.analyze(run, preprocessed)
        results = {
            "preprocess_step_result": preprocessed,
            "analyze_step_result": analysis,
        }
        score = self.generate_score(results)
        return ScoreResult(
            scorer=self.name,
            score=score,
            reason=self.generate_reason(results, score),
            preprocess_result=preprocessed,
            analyze_result=analysis,
        )


class LLMJudgedScorer(Scorer):
    """
    Scorer whose analyze stage asks a judge model for a structured verdict.

    Subclasses set `instructions` and `analysis_schema` and implement
    `build_prompt`.
    """

    instructions: str = ""
    analysis_schema: type[BaseModel]

    def __init__(
        self,
        judge_model: str | BaseChatModel = "openai/gpt-4o",
        temperature: float = 0.0,
    ):
        self.judge_model = judge_model
        self.temperature = temperature
        self._judge: BaseChatModel | None = None

    @property
    def judge(self) -> BaseChatModel:
        """Lazy initialization of the judge model."""
        if self._judge is None:
            self._judge = resolve_chat_model(self.judge_model, self.temperature)
        return self._judge

    def build_prompt(self, preprocessed: dict[str, Any]) -> str:
        raise NotImplementedError

    async def analyze(self, run: ScoringRun, preprocessed: dict[str, Any]) -> dict[str, Any]:
        structured = self.judge.with_structured_output(self.analysis_schema)
        verdict = await structured.ainvoke([
            SystemMessage(content=self.instructions),
            HumanMessage(content=self.build_prompt(preprocessed)),
        ])
        if isinstance(verdict, BaseModel):
            return verdict.model_dump()
        return self.analysis_schema.model_validate(verdict).model_dump()


# ============================================================
# Sampling
# ============================================================

@dataclass
class ScorerBinding:
    """A scorer attached to an agent with a ratio sampling policy."""
    scorer: Scorer
    sampling_rate: float = 1.0

    def should_sample(self) -> bool:
        if self.sampling_rate >= 1.0:
            return True
        if self.sampling_rate <= 0.0:
            return False
        return random.random() < self.sampling_rate
