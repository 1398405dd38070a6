"""Runs jq filters against the session document."""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class JqNotFoundError(RuntimeError):
    """The jq binary could not be located."""


@dataclass(frozen=True)
class QueryResult:
    ok: bool
    text: str

    @classmethod
    def success(cls, text: str) -> QueryResult:
        return cls(True, text)

    @classmethod
    def failure(cls, text: str) -> QueryResult:
        return cls(False, text)


class JqExecutor:
    """Callable ``query -> QueryResult`` backed by the ``jq`` binary.

    Each call blocks until jq exits; there is no cancellation.
    """

    def __init__(
        self,
        document: str,
        *,
        jq_path: str = "jq",
        color: bool = False,
        timeout: float | None = None,
    ) -> None:
        resolved = shutil.which(jq_path)
        if resolved is None:
            raise JqNotFoundError(f"jq not found: {jq_path}")
        self.jq_path: str = resolved
        self.document: str = document
        self.color: bool = color
        self.timeout: float | None = timeout

    def __call__(self, query: str) -> QueryResult:
        return self.execute(query)

    def execute(self, query: str) -> QueryResult:
        args = [self.jq_path]
        if self.color:
            args.append("-C")
        args.append(query.strip() or ".")
        try:
            proc = subprocess.run(
                args,
                input=self.document,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.warning("jq timed out after %ss: %r", self.timeout, query)
            return QueryResult.failure(f"jq: timed out after {self.timeout}s")
        except OSError as e:
            logger.error("failed to run %s: %s", self.jq_path, e)
            return QueryResult.failure(f"jq: {e}")
        if proc.returncode != 0:
            logger.debug("jq exited %d for %r", proc.returncode, query)
            return QueryResult.failure(proc.stderr.strip() or f"jq exited {proc.returncode}")
        return QueryResult.success(proc.stdout.rstrip("\n"))
