"""Configuration value objects with validation."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class InpaintStrategy(str, Enum):
    """Background reconstruction strategies."""
    AUTO = "auto"
    RADIAL = "radial"
    FLOOD_FILL = "flood-fill"
    OPENCV = "opencv"


class InpaintMethod(str, Enum):
    """OpenCV inpainting algorithms."""
    TELEA = "telea"
    NAVIER_STOKES = "navier-stokes"


class InpaintOptions(BaseModel):
    """Inpainting and inpaint-grouping options."""
    
    model_config = {"validate_assignment": True}
    
    strategy: InpaintStrategy = InpaintStrategy.FLOOD_FILL
    method: InpaintMethod = InpaintMethod.TELEA
    radius: int = Field(default=3, ge=1, le=32)
    debug: bool | None = None
    
    # Grouping thresholds
    max_region_size_px: int | None = Field(default=None, ge=1)
    max_union_area_ratio: float = Field(default=0.3, ge=0.0, le=1.0)
    group_distance: float = Field(default=12.0, ge=0.0)
    
    def region_size_limit(self, image_width: int, image_height: int) -> int:
        """Largest group area inpainted as one union (defaults to 40% of the image)."""
        if self.max_region_size_px is not None:
            return self.max_region_size_px
        return round(image_width * image_height * 0.4)


class TranslateImageOptions(BaseModel):
    """Options for one translate-image invocation."""
    
    model_config = {"validate_assignment": True}
    
    debug: bool = False
    inpaint: InpaintOptions = Field(default_factory=InpaintOptions)
    
    padding: int = Field(default=16, ge=0, le=256)
    noise_amount: float = Field(default=1.5, ge=0.0, le=32.0)
    seed: int | None = None
    
    # Shadow pass
    shadow_blur: float = Field(default=1.0, ge=0.0, le=16.0)
    shadow_offset_x: int = 0
    shadow_offset_y: int = 0
    
    # Debug step caps
    max_debug_group_steps: int = Field(default=10, ge=0)
    max_debug_background_steps: int = Field(default=5, ge=0)
    
    font_path: str | None = None
    
    @field_validator("font_path")
    @classmethod
    def validate_font_path(cls, v: str | None) -> str | None:
        """Treat blank font paths as unset."""
        if v is not None and not v.strip():
            return None
        return v


__all__ = [
    'InpaintStrategy',
    'InpaintMethod',
    'InpaintOptions',
    'TranslateImageOptions',
]
