"""Domain enumerations."""

from enum import StrEnum


class ModelId(StrEnum):
    """Video generation models offered by the workflow."""

    NANO_VEO = "Nano + Veo 3.1"
    SORA_2 = "Sora 2"


class JobState(StrEnum):
    """Client-observable state of a generation job."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.COMPLETED, JobState.FAILED)


class BadgeId(StrEnum):
    """Achievement badges."""

    NOVICE = "novice"
    CRAFTER = "crafter"
    ALCHEMIST = "alchemist"
    VISIONARY = "visionary"
    PROMPT_MASTER = "promptMaster"


class BadgeTier(StrEnum):
    """Display tier of a badge."""

    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    DIAMOND = "diamond"
    SPECIAL = "special"


class ModelSpeed(StrEnum):
    """Relative turnaround of a generation model."""

    FAST = "Fast"
    BALANCED = "Balanced"
    PREMIUM = "Premium"
