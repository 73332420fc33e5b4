"""Decision trace logging for the Casework simulator.

Records every simulated day for debugging and balance analysis:
- The learner context handed to the Director
- The Director's decision (event, mode, modifiers, timers)
- Whether the simulated learner resolved the event correctly
"""

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from casework.models.context import PlanInput
from casework.models.decision import Decision


@dataclass
class ContextSnapshot:
    """Snapshot of the learner context for one day."""

    day: int
    mastery_by_topic: dict[str, float]
    mistake_topics: list[str]
    meter_states: dict[str, int]


@dataclass
class DayRecord:
    """Record of one simulated day."""

    day: int
    context: ContextSnapshot
    decision: dict[str, Any]
    correct: bool | None


@dataclass
class SimulationTrace:
    """Complete trace of a simulated campaign."""

    trace_id: str
    pack_id: str
    seed: int
    start_time: str
    active_modifiers: list[str] = field(default_factory=list)
    end_time: str | None = None
    days: list[DayRecord] = field(default_factory=list)
    summary: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "trace_id": self.trace_id,
            "pack_id": self.pack_id,
            "seed": self.seed,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "active_modifiers": self.active_modifiers,
            "days": [asdict(d) for d in self.days],
            "summary": self.summary,
        }


class DecisionTraceLogger:
    """Logger for Director decisions in a simulated campaign."""

    def __init__(
        self,
        pack_id: str,
        seed: int,
        active_modifiers: list[str] | None = None,
        output_dir: Path | None = None,
    ):
        """Initialize trace logger.

        Args:
            pack_id: ID of the content pack being simulated
            seed: Director seed, needed to replay the trace
            active_modifiers: Map modifier IDs active for the run
            output_dir: Directory for trace files (default: ./traces)
        """
        self.output_dir = output_dir or Path("traces")
        self.output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        trace_id = f"{pack_id}_{seed}_{timestamp}"

        self.trace = SimulationTrace(
            trace_id=trace_id,
            pack_id=pack_id,
            seed=seed,
            start_time=datetime.now().isoformat(),
            active_modifiers=list(active_modifiers or []),
        )
        self._output_file = self.output_dir / f"{trace_id}.json"

    @property
    def output_file(self) -> Path:
        """Path the trace is written to."""
        return self._output_file

    def capture_context(self, context: PlanInput) -> ContextSnapshot:
        """Capture a snapshot of the learner context."""
        return ContextSnapshot(
            day=context.day,
            mastery_by_topic={
                topic: context.mastery_for(topic) for topic in context.mastery_by_topic
            },
            mistake_topics=[mistake.topic for mistake in context.recent_mistakes],
            meter_states=dict(context.meter_states),
        )

    def record_day(self, context: PlanInput, decision: Decision, correct: bool | None) -> None:
        """Record one simulated day and save the trace.

        Args:
            context: Context handed to the Director
            decision: Decision the Director returned
            correct: Learner result (None if no event was selected)
        """
        self.trace.days.append(
            DayRecord(
                day=decision.day,
                context=self.capture_context(context),
                decision=decision.to_dict(),
                correct=correct,
            )
        )
        self.save()

    def record_summary(self, summary: dict[str, Any]) -> None:
        """Record the end-of-run summary and save the trace."""
        self.trace.end_time = datetime.now().isoformat()
        self.trace.summary = summary
        self.save()

    def save(self) -> Path:
        """Save the trace to a JSON file.

        Returns:
            Path to the saved file
        """
        with open(self._output_file, "w") as f:
            json.dump(self.trace.to_dict(), f, indent=2)
        return self._output_file
