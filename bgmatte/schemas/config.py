from __future__ import annotations
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Literal, Optional

THRESHOLD_MIN = 1.0
THRESHOLD_MAX = 100.0
BLUR_RADIUS_MIN = 0
BLUR_RADIUS_MAX = 10


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _as_number(v, name: str) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {v!r}") from None


class PathsConfig(BaseModel):
    input_dir: str
    output_dir: str
    masks_dir: str = "data/masks"
    logs_dir: str = "data/logs"


class RunConfig(BaseModel):
    limit: Optional[int] = None
    save_masks: bool = False           # write <stem>-mask.png next to outputs for audit
    log_progress: bool = True          # log stage progress at INFO level
    max_bytes: int = 5 * 1024 * 1024   # larger input files are skipped


class MaskingConfig(BaseModel):
    threshold: float = 30.0            # sensitivity 1..100, scaled by 2.55 onto RGB distance
    engine: Literal["frontier", "queue"] = "frontier"
    cancel_check_every: int = 4096     # queue engine: dequeues between cancellation checks

    @field_validator("threshold", mode="before")
    @classmethod
    def _clamp_threshold(cls, v):
        return clamp(_as_number(v, "threshold"), THRESHOLD_MIN, THRESHOLD_MAX)

    @field_validator("cancel_check_every")
    @classmethod
    def _positive_interval(cls, v: int) -> int:
        return max(1, v)


class BlurConfig(BaseModel):
    radius: int = 3                    # 0 disables edge softening

    @field_validator("radius", mode="before")
    @classmethod
    def _clamp_radius(cls, v):
        return int(clamp(int(round(_as_number(v, "blur radius"))), BLUR_RADIUS_MIN, BLUR_RADIUS_MAX))


class QCConfig(BaseModel):
    min_foreground_fraction: float = 0.01
    max_foreground_fraction: float = 0.99

    @model_validator(mode="after")
    def _ordered(self) -> "QCConfig":
        if self.min_foreground_fraction > self.max_foreground_fraction:
            raise ValueError("qc.min_foreground_fraction must be <= qc.max_foreground_fraction")
        return self


class AppConfig(BaseModel):
    paths: PathsConfig
    run: RunConfig = Field(default_factory=RunConfig)
    masking: MaskingConfig = Field(default_factory=MaskingConfig)
    blur: BlurConfig = Field(default_factory=BlurConfig)
    qc: QCConfig = Field(default_factory=QCConfig)
