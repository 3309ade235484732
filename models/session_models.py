"""Session domain models for the analysis workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional


class AnalysisStatus(str, Enum):
	"""Status of an analysis session; exactly one holds at a time."""

	IDLE = "idle"
	ANALYZING = "analyzing"
	SUCCESS = "success"
	ERROR = "error"


@dataclass
class GatewayResult:
	"""Text returned by the hosted model plus call metadata."""

	text: str
	usage: Dict[str, Optional[int]] = field(default_factory=dict)
	latency: float = 0.0
