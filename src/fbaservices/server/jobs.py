"""In-memory job queue backing the queueing service methods."""
from __future__ import annotations

import itertools
import threading
from datetime import datetime, timezone
from typing import Any

from fbaservices.domain.models import JobData


class JobQueue:
    def __init__(self) -> None:
        self._jobs: dict[str, JobData] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def submit(self, job_type: str, *, owner: str | None, jobdata: dict[str, Any]) -> JobData:
        with self._lock:
            job = JobData(id=f"job.{next(self._ids)}", type=job_type, owner=owner, jobdata=jobdata)
            self._jobs[job.id] = job
            return job

    def get(self, job_id: str) -> JobData | None:
        with self._lock:
            return self._jobs.get(job_id)

    def complete(self, job_id: str) -> JobData:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                raise KeyError(job_id)
            done = job.model_copy(
                update={
                    "status": "done",
                    "completetime": datetime.now(timezone.utc).isoformat(timespec="seconds"),
                }
            )
            self._jobs[job_id] = done
            return done

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)
