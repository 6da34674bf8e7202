from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

from .filters import validate_amount
from .resample import ResampleMethod, validate_scale


# Config dataclasses

@dataclass
class EnhanceConfig:
    method: str = "lanczos"     # 'bilinear' | 'bicubic' | 'lanczos'
    scale: int = 2              # integer factor, >= 1
    sharpening: float = 0.5     # unsharp mask amount, 0 => skip sharpening

    def validate(self) -> None:
        """Raise UnsupportedMethod / InvalidDimensions / InvalidSharpening on bad values."""
        ResampleMethod.parse(self.method)
        validate_scale(self.scale)
        validate_amount(self.sharpening)


@dataclass
class PipelineConfig:
    enhance: EnhanceConfig = field(default_factory=EnhanceConfig)
    save_dir: Optional[str] = None
    show: bool = False
