"""
Configuration settings for the sheet grader service
"""
from pydantic_settings import BaseSettings
from pathlib import Path
from typing import List

from .grader.config import RecognitionConfig


class Settings(BaseSettings):
    """Application settings using pydantic-settings"""

    # Server settings
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    DEBUG: bool = True

    # CORS settings
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # Project paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # Sheet layout defaults for the HTTP session
    NUM_BLOCKS: int = 2
    ROWS_PER_BLOCK: int = 20
    OPTIONS_PER_QUESTION: int = 4
    UPSCALE_FACTOR: float = 2.0
    INTENSITY_THRESHOLD: float = 100
    POINTS_PER_QUESTION: int = 1

    # Detection tuning
    MIN_PEAK_DISTANCE: int = 20
    PEAK_THRESHOLD_RATIO: float = 0.3
    MIN_PEAK_FRACTION: float = 0.8
    BUBBLE_RADIUS: int = 15
    STABILITY_THRESHOLD: float = 15.0
    STABILITY_FRAME_COUNT: int = 10

    class Config:
        env_file = ".env"
        extra = "allow"

    def recognition_config(self) -> RecognitionConfig:
        """Recognition parameters for a new grading session"""
        return RecognitionConfig(
            num_blocks=self.NUM_BLOCKS,
            rows_per_block=self.ROWS_PER_BLOCK,
            options_per_question=self.OPTIONS_PER_QUESTION,
            upscale_factor=self.UPSCALE_FACTOR,
            intensity_threshold=self.INTENSITY_THRESHOLD,
            min_peak_distance=self.MIN_PEAK_DISTANCE,
            peak_threshold_ratio=self.PEAK_THRESHOLD_RATIO,
            min_peak_fraction=self.MIN_PEAK_FRACTION,
            bubble_radius=self.BUBBLE_RADIUS,
            stability_threshold=self.STABILITY_THRESHOLD,
            stability_frame_count=self.STABILITY_FRAME_COUNT,
        )


settings = Settings()

# Ensure directories exist
settings.LOGS_DIR.mkdir(parents=True, exist_ok=True)
