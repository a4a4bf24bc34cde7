"""
Engine result record shared by all comparison engines.

Every engine exposes pure functions over a ComparisonPair and a Region, and
a run_* wrapper that times the computation, writes any output file and
returns an EngineResult for the driver to report.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import polars as pl

logger = logging.getLogger(__name__)


@dataclass
class EngineResult:
    """Result of an engine run."""
    engine_name: str
    started_at: datetime
    success: bool = False
    completed_at: Optional[datetime] = None
    parameters: Dict[str, Any] = field(default_factory=dict)
    metrics: Dict[str, Any] = field(default_factory=dict)
    tables: Dict[str, pl.DataFrame] = field(default_factory=dict)
    outputs: List[Path] = field(default_factory=list)

    @classmethod
    def start(cls, engine_name: str, **parameters) -> 'EngineResult':
        """Open a result record; call finish() when the engine is done."""
        logger.debug(f"Engine {engine_name} started with {parameters}")
        return cls(engine_name=engine_name, started_at=datetime.now(), parameters=parameters)

    def finish(self, **metrics) -> 'EngineResult':
        self.metrics.update(metrics)
        self.completed_at = datetime.now()
        self.success = True
        logger.info(f"{self.engine_name}: done in {self.runtime_seconds:.3f}s")
        return self

    def add_output(self, path: Path) -> None:
        self.outputs.append(Path(path))

    def add_table(self, name: str, df: pl.DataFrame) -> None:
        self.tables[name] = df

    @property
    def runtime_seconds(self) -> float:
        if self.completed_at and self.started_at:
            return (self.completed_at - self.started_at).total_seconds()
        return 0.0

    def summary(self) -> str:
        """Human-readable summary."""
        status = "SUCCESS" if self.success else "FAILED"
        lines = [
            f"Engine: {self.engine_name}",
            f"Status: {status}",
            f"Runtime: {self.runtime_seconds:.2f}s",
        ]
        if self.parameters:
            lines.append(f"Parameters: {self.parameters}")
        if self.metrics:
            lines.append(f"Metrics: {self.metrics}")
        for path in self.outputs:
            lines.append(f"Output: {path}")
        return "\n".join(lines)
