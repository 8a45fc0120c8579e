"""
Result types shared by the parameter and maze checks.

A check collects `ValidationIssue`s into a `ValidationResult`. FAIL issues
make the result fail; WARN and INFO are reported only. Engines raise a
`ValidationError` subclass carrying the failed result.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class Severity(Enum):
    """How serious an issue is, most serious last."""
    INFO = 1
    WARN = 2
    FAIL = 3

    def __str__(self) -> str:
        return self.name


class ValidationStage(Enum):
    """Where in a generation run a check ran."""
    PARAMETERS = "parameters"  # before any state is touched
    GENERATION = "generation"  # after segments are emitted

    def __str__(self) -> str:
        return self.value


@dataclass
class ValidationIssue:
    """
    One finding.

    `code` is a rule id such as "PARAM-002" or "MAZE-004"; `location` names
    the offending parameter or cell when there is one.
    """
    severity: Severity
    code: str
    message: str
    remediation: Optional[str] = None
    location: Optional[str] = None

    def format(self) -> str:
        where = f" {self.location}" if self.location else ""
        text = f"[{self.severity}] {self.code}{where}: {self.message}"
        if self.remediation:
            text += f" ({self.remediation})"
        return text

    def __str__(self) -> str:
        return self.format()


@dataclass
class ValidationResult:
    issues: List[ValidationIssue] = field(default_factory=list)
    stage: Optional[ValidationStage] = None

    def by_severity(self, severity: Severity) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity is severity]

    @property
    def errors(self) -> List[ValidationIssue]:
        return self.by_severity(Severity.FAIL)

    @property
    def warnings(self) -> List[ValidationIssue]:
        return self.by_severity(Severity.WARN)

    @property
    def failed(self) -> bool:
        return bool(self.errors)

    @property
    def passed(self) -> bool:
        return not self.failed

    def add(self, severity: Severity, code: str, message: str,
            remediation: Optional[str] = None, location: Optional[str] = None):
        self.issues.append(ValidationIssue(severity, code, message, remediation, location))

    def report(self) -> str:
        """Human-readable summary, most serious issues first."""
        stage = f" at {self.stage} stage" if self.stage else ""
        if not self.issues:
            return f"Validation passed{stage}"

        status = "passed" if self.passed else "failed"
        lines = [f"Validation {status}{stage} with {len(self.issues)} issue(s)"]
        for issue in sorted(self.issues, key=lambda i: -i.severity.value):
            lines.append(f"  {issue.format()}")
        return "\n".join(lines)

    def to_dict(self) -> Dict:
        counts = {str(severity).lower(): len(self.by_severity(severity)) for severity in Severity}
        return {
            'passed': self.passed,
            'stage': str(self.stage) if self.stage else None,
            'counts': counts,
            'issues': [dict(asdict(issue), severity=str(issue.severity)) for issue in self.issues],
        }


class ValidationError(Exception):
    """A check failed; `result` holds every issue it found."""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__(result.report())


class InvalidParameterError(ValidationError):
    """Generation parameters are out of range or of the wrong type.

    `message` is the first error, suitable for showing to the user.
    """

    def __init__(self, result: ValidationResult):
        super().__init__(result)
        self.message = result.errors[0].message if result.errors else "Invalid parameters"


class ConnectivityError(ValidationError):
    """The spanning walk left cells isolated and strict mode is on."""
