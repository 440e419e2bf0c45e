"""Helpers shared by the generators for turning instructions into steps."""
from typing import List, Optional, Sequence, Tuple
from app.core.config import STEP_BASE_OFFSET, STEP_STRIDE
from app.models.job import Step
from app.timecode import format_timestamp

STEP_COLORS = ["3b82f6", "10b981", "8b5cf6", "f59e0b", "ef4444", "06b6d4", "8b5cf6", "ec4899"]
STEP_TYPES = ["setup", "action", "configuration", "verification", "completion"]
PLACEHOLDER_URL = "https://placehold.co"

def schedule_offsets(count: int, base: int = STEP_BASE_OFFSET, stride: int = STEP_STRIDE) -> List[int]:
    """Offsets in seconds on the base-plus-stride schedule."""
    return [base + index * stride for index in range(count)]

def build_steps(
    instructions: Sequence[str],
    offsets: Optional[Sequence[int]] = None,
    types: Optional[Sequence[Optional[str]]] = None,
    stride: int = STEP_STRIDE,
) -> Tuple[Step, ...]:
    """Build numbered steps from instructions.

    ``offsets`` defaults to the fixed schedule. ``types`` entries that are
    missing or ``None`` fall back to the rotating step types.
    """
    if offsets is None:
        offsets = schedule_offsets(len(instructions), stride=stride)
    if len(offsets) != len(instructions):
        raise ValueError("every instruction needs exactly one offset")

    steps = []
    for index, (text, offset) in enumerate(zip(instructions, offsets)):
        number = index + 1
        color = STEP_COLORS[index % len(STEP_COLORS)]
        step_type = None
        if types is not None and index < len(types):
            step_type = types[index]
        steps.append(Step(
            id=number,
            timestamp=format_timestamp(offset),
            text=text,
            screenshot=f"{PLACEHOLDER_URL}/600x400/{color}/ffffff?text=Step+{number}&font=roboto",
            thumbnail=f"{PLACEHOLDER_URL}/300x200/{color}/ffffff?text=Step+{number}",
            color=color,
            type=step_type or STEP_TYPES[index % len(STEP_TYPES)],
            duration=f"{stride}s",
        ))
    return tuple(steps)

def build_enhanced_script(title: str, description: str, steps: Sequence[Step], stride: int = STEP_STRIDE) -> str:
    """Markdown version of the tutorial for the article view."""
    lines = "\n".join(f"{step.id}. {step.text}" for step in steps)
    return (
        f"# {title}\n\n## Overview\n{description}\n\n## Steps\n{lines}\n\n"
        f"## Summary\nComplete this tutorial in approximately {len(steps) * stride} seconds."
    )
