import asyncio
import logging
import random
from typing import Optional
from app.core.config import STEP_BASE_OFFSET, STEP_STRIDE
from app.generators.base import TutorialGenerator
from app.generators.steps import build_enhanced_script, build_steps, schedule_offsets
from app.models.job import TutorialResult
from app.models.video import StoredVideo
from app.templates import TutorialTemplate, list_templates
from app.timecode import format_timestamp

logger = logging.getLogger(__name__)

NARRATION_PHRASES = [
    "Alright, let me show you how to",
    "First thing you'll want to do is",
    "The key here is to make sure you",
    "Next, we're going to",
    "This part is important because",
    "Once that's done, you can",
    "Finally, to wrap things up",
    "And that's basically it for",
]

def build_transcript(template: TutorialTemplate, video_name: Optional[str]) -> str:
    """Narrated transcript with one timecode-labelled line per step."""
    parts = [
        f"# Transcript: {template.title}\n\n",
        f"Video: {video_name or 'screen_recording.mp4'}\n",
        f"Category: {template.category}\n\n",
        "**NARRATOR:** ",
        f"Today I'll show you how to {template.title.lower()}. ",
        "This is a straightforward process that should take just a few minutes.\n\n",
    ]
    offsets = schedule_offsets(len(template.steps), STEP_BASE_OFFSET, STEP_STRIDE)
    for index, (instruction, offset) in enumerate(zip(template.steps, offsets)):
        phrase = NARRATION_PHRASES[index % len(NARRATION_PHRASES)]
        timecode = format_timestamp(offset, pad_minutes=False)
        parts.append(f"**Step {index + 1} ({timecode}):** {phrase} {instruction.lower()}.\n")
        if index % 3 == 0:
            parts.append("[brief pause]\n")
    parts.append(f"\n**CONCLUSION:** And that's how you {template.title.lower()}. ")
    parts.append("Thanks for watching!\n")
    return "".join(parts)

class SimulatedGenerator(TutorialGenerator):
    """Builds a tutorial from a catalog template after an artificial delay."""

    mode = "simulated_enhanced"

    def __init__(
        self,
        delay_min: float = 3.0,
        delay_max: float = 6.0,
        rng: Optional[random.Random] = None,
        templates: Optional[list] = None,
    ):
        if delay_min > delay_max:
            raise ValueError("delay_min must not exceed delay_max")
        self.delay_min = delay_min
        self.delay_max = delay_max
        self.rng = rng or random.Random()
        self.templates = templates or list_templates()

    def pick_template(self) -> TutorialTemplate:
        return self.rng.choice(self.templates)

    def build(self, template: TutorialTemplate, video_name: Optional[str]) -> TutorialResult:
        """Build the result for a given template without any delay."""
        steps = build_steps(template.steps)
        return TutorialResult(
            steps=steps,
            transcript=build_transcript(template, video_name),
            enhanced_script=build_enhanced_script(template.title, template.description, steps),
            template_id=template.id,
            template_title=template.title,
            template_category=template.category,
            template_description=template.description,
            ai_mode=self.mode,
        )

    async def generate(self, video: StoredVideo) -> TutorialResult:
        template = self.pick_template()
        delay = self.rng.uniform(self.delay_min, self.delay_max)
        logger.info(f"Using template: \"{template.title}\" ({template.category}) for {video.filename}")
        logger.info(f"Simulating AI processing for {delay:.1f} seconds...")
        await asyncio.sleep(delay)
        return self.build(template, video.original_name)

    def describe(self) -> dict:
        return {
            "mode": self.mode,
            "message": "Using enhanced simulated AI (no API credits needed)",
            "templates": [template.id for template in self.templates],
            "delaySeconds": [self.delay_min, self.delay_max],
        }
