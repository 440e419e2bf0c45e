from .base import TutorialGenerator
from .simulated import SimulatedGenerator

def get_generator(settings) -> TutorialGenerator:
    """Build the generator named by ``settings.GENERATOR_MODE``."""
    mode = settings.GENERATOR_MODE
    if mode == "simulated":
        import random
        return SimulatedGenerator(
            delay_min=settings.SIMULATED_DELAY_MIN,
            delay_max=settings.SIMULATED_DELAY_MAX,
            rng=random.Random(settings.SIMULATED_SEED),
        )
    if mode == "openai":
        from .openai_generator import OpenAIGenerator
        return OpenAIGenerator(
            model=settings.OPENAI_MODEL,
            transcription_model=settings.TRANSCRIPTION_MODEL,
        )
    raise ValueError(f"Unknown generator mode: {mode}")

__all__ = ['TutorialGenerator', 'SimulatedGenerator', 'get_generator']
