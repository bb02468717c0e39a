"""File-based session sink."""

import json
from pathlib import Path
from typing import Union

from ..errors import PersistenceError
from .base import SessionSink
from .models import SessionRecord


class FileSessionSink(SessionSink):
    """Appends sessions to a JSONL file or a JSON array file."""

    def __init__(
        self,
        output_path: Union[str, Path],
        name: str = "file",
        format: str = "jsonl",
        create_dirs: bool = True
    ):
        super().__init__(name)
        if format not in ("json", "jsonl"):
            raise ValueError(f"Unsupported format: {format}")

        self.output_path = Path(output_path)
        self.format = format

        if create_dirs:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)

    def record(self, session: SessionRecord) -> None:
        try:
            if self.format == "json":
                self._write_json_format(session.to_dict())
            else:
                self._write_jsonl_format(session.to_dict())
        except OSError as e:
            self._error_count += 1
            raise PersistenceError(
                f"File system error: {e}",
                operation="write",
                target=str(self.output_path)
            ) from e

        self._record_count += 1
        self.logger.info(
            "Session written to file",
            sink=self.name,
            session_id=session.session_id,
            output_path=str(self.output_path)
        )

    def _write_json_format(self, payload: dict) -> None:
        """Rewrite the file as a JSON array including the new session."""
        existing = []
        if self.output_path.exists():
            try:
                with open(self.output_path) as f:
                    existing = json.load(f)
                if not isinstance(existing, list):
                    existing = []
            except json.JSONDecodeError:
                # Corrupted or empty file, start fresh
                self.logger.warning(
                    "Session file is not a JSON array, starting fresh",
                    output_path=str(self.output_path)
                )
                existing = []

        existing.append(payload)
        with open(self.output_path, "w") as f:
            json.dump(existing, f, indent=2)

    def _write_jsonl_format(self, payload: dict) -> None:
        with open(self.output_path, "a") as f:
            f.write(json.dumps(payload) + "\n")

    def read_all(self) -> list[dict]:
        """Load every recorded session from the file."""
        if not self.output_path.exists():
            return []

        if self.format == "json":
            with open(self.output_path) as f:
                return json.load(f)

        with open(self.output_path) as f:
            return [json.loads(line) for line in f if line.strip()]

    def health_check(self) -> bool:
        return self.output_path.parent.exists()
