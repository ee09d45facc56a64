"""Operation result models"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..constants import EMOJI_SUCCESS


@dataclass
class ValidationResult:
    """Validation result container

    Only accepted plans produce a result; violations are raised as
    ValidationError.
    """
    is_valid: bool = True
    info: List[str] = field(default_factory=list)

    def add_info(self, message: str) -> None:
        """Add info message"""
        self.info.append(message)

    def add_success(self, message: str) -> None:
        """Add success info message"""
        self.info.append(f"{EMOJI_SUCCESS} {message}")

    def __str__(self) -> str:
        lines = []

        if self.info:
            lines.append("Info:")
            for info in self.info:
                lines.append(f"  {info}")

        if self.is_valid:
            lines.append(f"{EMOJI_SUCCESS} All validations passed")

        return '\n'.join(lines)


@dataclass
class DeployResult:
    """Deployment run result"""
    success: bool
    dry_run: bool = False
    deployed_targets: List[str] = field(default_factory=list)
    skipped_reason: Optional[str] = None
    error: Optional[str] = None
    start_time: datetime = field(default_factory=datetime.utcnow)
    end_time: Optional[datetime] = None

    @property
    def skipped(self) -> bool:
        return self.skipped_reason is not None

    @property
    def duration(self) -> float:
        """Duration in seconds"""
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()

    def complete(self) -> 'DeployResult':
        """Mark result as finished"""
        self.end_time = datetime.utcnow()
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "success": self.success,
            "dry_run": self.dry_run,
            "deployed_targets": self.deployed_targets,
            "skipped_reason": self.skipped_reason,
            "error": self.error,
            "duration": self.duration
        }
