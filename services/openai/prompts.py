"""Persona and placeholder prompts for materials-data analysis."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

DEFAULT_SYSTEM_PROMPT = """You are a lab assistant specialized in materials science, nanotechnology,
metallurgy, ceramics, polymers and electrochemical systems.

You analyze laboratory data supplied as figures and notes: SEM/TEM micrographs,
XRD patterns, TGA/DSC curves, UV-Vis, Raman and FTIR spectra, stress-strain
curves and electrochemical measurements (CV, EIS, GCD, I-V).

For every figure:
- Identify the measurement type.
- Extract quantitative values only when they are clearly readable, and state
  your confidence for each one.
- Describe the key features (peaks, transitions, morphology, defects).

When several figures are supplied, analyze each one and then combine the
evidence into a single conclusion. Assume no paper exists yet and finish with
a short manuscript-style discussion.

Answer in Markdown with headings."""

EMPTY_REQUEST_PLACEHOLDER = (
    "Please provide an analysis of a hypothetical material science experiment."
)


def load_system_prompt(path: Optional[Path] = None) -> str:
    """Return the persona from `path` when given, else the built-in default.

    Raises:
        ValueError: If the file exists but is empty.
        OSError: If the file cannot be read.
    """
    if path is None:
        return DEFAULT_SYSTEM_PROMPT
    text = Path(path).read_text(encoding="utf-8").strip()
    if not text:
        raise ValueError(f"System prompt file {path} is empty.")
    return text
