"""Custom exceptions for the image translator."""

from typing import Optional


class ImageTranslatorError(Exception):
    """Base exception for all application errors.
    
    Attributes:
        message: Human-readable error description
        error_code: Optional error code for programmatic handling
    """
    
    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
    
    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ValidationError(ImageTranslatorError):
    """Error validating inputs or parameters.
    
    Attributes:
        field: The field that failed validation (if applicable)
    """
    
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, error_code="VALIDATION_ERROR")
        self.field = field


class GeometryError(ImageTranslatorError):
    """Error computing or inverting a projective transform."""
    
    def __init__(self, message: str):
        super().__init__(message, error_code="GEOMETRY_ERROR")


class RenderError(ImageTranslatorError):
    """Error creating a drawing surface or loading a font."""
    
    def __init__(self, message: str):
        super().__init__(message, error_code="RENDER_ERROR")


class EncodingError(ImageTranslatorError):
    """Error encoding a raster to PNG."""
    
    def __init__(self, message: str):
        super().__init__(message, error_code="ENCODING_ERROR")


class TranslationError(ImageTranslatorError):
    """Error raised by the translation collaborator.
    
    Attributes:
        region_id: The region whose text failed to translate (if applicable)
    """
    
    def __init__(self, message: str, region_id: Optional[str] = None):
        super().__init__(message, error_code="TRANSLATION_ERROR")
        self.region_id = region_id
    
    def __str__(self) -> str:
        if self.region_id:
            return f"{super().__str__()} (region: {self.region_id})"
        return super().__str__()


class OCRError(ImageTranslatorError):
    """Error reading OCR output."""
    
    def __init__(self, message: str):
        super().__init__(message, error_code="OCR_ERROR")
