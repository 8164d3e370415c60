from vibecore.services.context.engine import ContextEngine, infer_mood, infer_situation, time_of_day
from vibecore.services.context.presets import SITUATION_PRESETS, SituationPreset

__all__ = [
    "ContextEngine",
    "SITUATION_PRESETS",
    "SituationPreset",
    "infer_mood",
    "infer_situation",
    "time_of_day",
]
