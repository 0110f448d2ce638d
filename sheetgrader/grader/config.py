"""
Recognition configuration shared by the grader components
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class RecognitionConfig:
    """Layout and detection parameters for a bubble sheet"""
    # Sheet layout (configured, never inferred from the image)
    num_blocks: int = 2
    rows_per_block: int = 20
    options_per_question: int = 4

    # Enhancement
    upscale_factor: float = 2.0

    # Row detection
    margin_ratio: float = 0.05
    timing_strip_ratio: float = 0.1
    min_peak_distance: int = 20
    peak_threshold_ratio: float = 0.3
    min_peak_fraction: float = 0.8

    # Answer extraction
    bubble_radius: int = 15
    intensity_threshold: float = 100

    # Live capture
    stability_threshold: float = 15.0
    stability_frame_count: int = 10
    warp_width: int = 800
    warp_height: int = 1000

    def __post_init__(self):
        for name in ("num_blocks", "rows_per_block", "options_per_question",
                     "min_peak_distance", "bubble_radius", "stability_frame_count",
                     "warp_width", "warp_height"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.options_per_question > 26:
            raise ValueError("options_per_question must be at most 26")
        if self.upscale_factor <= 0:
            raise ValueError(f"upscale_factor must be positive, got {self.upscale_factor}")
        if not 0 <= self.margin_ratio < 0.5:
            raise ValueError(f"margin_ratio must be in [0, 0.5), got {self.margin_ratio}")
        if not 0 < self.timing_strip_ratio <= 1:
            raise ValueError(f"timing_strip_ratio must be in (0, 1], got {self.timing_strip_ratio}")

    @property
    def total_questions(self) -> int:
        return self.num_blocks * self.rows_per_block
