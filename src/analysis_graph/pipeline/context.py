from __future__ import annotations

import uuid
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RunContext:
    """Run identifiers and standard artifact paths for one pipeline run."""

    run_dir: Path
    run_id: str
    source_path: Path
    source_sha256: str

    @classmethod
    def create(
        cls,
        *,
        runs_root: Path,
        source_path: Path,
        source_sha256: str,
        run_id: str | None = None,
    ) -> "RunContext":
        rid = run_id or str(uuid.uuid4())
        return cls(
            run_dir=runs_root / rid,
            run_id=rid,
            source_path=source_path,
            source_sha256=source_sha256,
        )

    def path(self, filename: str) -> Path:
        return self.run_dir / filename

    def metadata_path(self) -> Path:
        return self.path("metadata.json")

    def questions_path(self) -> Path:
        return self.path("questions.json")

    def report_path(self) -> Path:
        return self.path("report.md")

    def analysis_log_path(self) -> Path:
        return self.path("analysis_log.json")
