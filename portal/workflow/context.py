from dataclasses import dataclass, field
from typing import Any

from portal.workflow.enums import StateKey


@dataclass
class WorkerContext:
    """Mutable state shared by the workers of one pipeline run."""

    request_id: str
    narrative: str = ""
    goal: str = ""
    task: str = ""
    state: dict[str, Any] = field(default_factory=dict)
    logs: list[str] = field(default_factory=list)

    def log(self, message: str) -> None:
        self.logs.append(message)

    def override_narrative(self, narrative: str | None) -> None:
        if narrative and narrative.strip():
            self.state[StateKey.NARRATIVE_OVERRIDE] = narrative

    def narrative_effective(self) -> str:
        override = self.state.get(StateKey.NARRATIVE_OVERRIDE)
        if isinstance(override, str) and override.strip():
            return override
        return self.narrative

    def artifact(self, key: StateKey) -> str:
        value = self.state.get(key)
        return value if isinstance(value, str) else ""
