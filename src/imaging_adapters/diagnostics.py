"""Collects and logs issues reported by the registry."""

from __future__ import annotations

import logging
import threading
from typing import List, Optional, Tuple

from .schemas import IssueCode, RegistryIssue, Severity

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    Severity.INFO: logging.DEBUG,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.CRITICAL: logging.ERROR,
}


class IssueLog:
    """Records reported issues and forwards each to a logger.

    Informational issues (skipped plugins) are logged at DEBUG. Coding errors
    are CRITICAL issues logged at ERROR with a ``Coding error:`` prefix.
    With ``retain=False`` issues are only logged, never kept.
    """

    def __init__(self, log: Optional[logging.Logger] = None, *, retain: bool = True):
        self._log = log or logger
        self.retain = retain
        self._lock = threading.Lock()
        self._issues: List[RegistryIssue] = []

    def report(
        self,
        code: IssueCode,
        message: str,
        *,
        severity: Severity = Severity.ERROR,
        adapter_type: Optional[str] = None,
        key: Optional[str] = None,
    ) -> RegistryIssue:
        issue = RegistryIssue(
            code=code,
            message=message,
            severity=severity,
            adapter_type=adapter_type,
            key=key,
        )
        if self.retain:
            with self._lock:
                self._issues.append(issue)
        prefix = "Coding error: " if severity == Severity.CRITICAL else ""
        self._log.log(_LOG_LEVELS[severity], "%s%s", prefix, message)
        return issue

    def info(self, code: IssueCode, message: str, **kwargs) -> RegistryIssue:
        return self.report(code, message, severity=Severity.INFO, **kwargs)

    def warning(self, code: IssueCode, message: str, **kwargs) -> RegistryIssue:
        return self.report(code, message, severity=Severity.WARNING, **kwargs)

    def runtime_error(self, code: IssueCode, message: str, **kwargs) -> RegistryIssue:
        return self.report(code, message, severity=Severity.ERROR, **kwargs)

    def coding_error(self, code: IssueCode, message: str, **kwargs) -> RegistryIssue:
        return self.report(code, message, severity=Severity.CRITICAL, **kwargs)

    @property
    def issues(self) -> Tuple[RegistryIssue, ...]:
        with self._lock:
            return tuple(self._issues)

    def by_code(self, code: IssueCode) -> List[RegistryIssue]:
        return [issue for issue in self.issues if issue.code == code]

    def __len__(self) -> int:
        return len(self._issues)
