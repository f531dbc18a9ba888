"""Configuration and constants for the image translator."""

from dataclasses import dataclass


# Language prefixes (matched against the lowercase code or its primary subtag)
CJK_PREFIXES: tuple[str, ...] = ("zh", "ja", "ko")
RTL_PREFIXES: tuple[str, ...] = ("ar", "he", "fa", "ur")

# Font stacks per script, most preferred first
CJK_FONT_STACK: tuple[str, ...] = (
    "Noto Sans CJK",
    "Noto Sans JP",
    "PingFang SC",
    "Hiragino Sans",
    "Apple SD Gothic Neo",
    "sans-serif",
)
ARABIC_FONT_STACK: tuple[str, ...] = (
    "Noto Naskh Arabic",
    "Amiri",
    "Scheherazade New",
    "serif",
)
LATIN_FONT_STACK: tuple[str, ...] = (
    "Inter",
    "system-ui",
    "-apple-system",
    "Segoe UI",
    "Roboto",
    "Arial",
    "sans-serif",
)

# Directories searched for TrueType/OpenType files
FONT_SEARCH_DIRS: tuple[str, ...] = (
    "/usr/share/fonts",
    "/usr/local/share/fonts",
    "~/.fonts",
    "~/.local/share/fonts",
    "/System/Library/Fonts",
    "/Library/Fonts",
    "C:/Windows/Fonts",
)
FONT_EXTENSIONS: tuple[str, ...] = (".ttf", ".otf", ".ttc")


@dataclass(frozen=True)
class RegionConfig:
    """Thresholds for grouping OCR tokens into lines and paragraphs."""
    line_center_factor: float = 0.8  # x median token height
    line_overlap_ratio: float = 0.5
    line_min_overlap_ratio: float = 0.1
    paragraph_gap_factor: float = 1.2  # x median token height
    default_median: float = 12.0  # Used when there are no values
    rotation_threshold_deg: float = 2.0  # Item quads tilted beyond this keep their geometry


@dataclass(frozen=True)
class TextGroupingConfig:
    """Thresholds for the simplified paragraph text builder."""
    line_center_threshold: float = 0.4
    line_overlap_threshold: float = 0.5
    paragraph_gap_threshold: float = 0.7


@dataclass(frozen=True)
class LayoutConfig:
    """Constants for the text layout engine."""
    min_font_size: int = 8
    search_iterations: int = 12
    fit_ratio: float = 0.98
    line_height_factor: float = 1.18
    glyph_blur: float = 0.4


@dataclass(frozen=True)
class PipelineConfig:
    """Constants for the translate-image pipeline."""
    dilation_factor: float = 0.05
    dilation_min: int = 3
    dilation_max: int = 16
    rect_epsilon: float = 0.5
    light_background_luma: float = 0.55
    dark_text_color: tuple[int, int, int] = (20, 20, 20)
    light_text_color: tuple[int, int, int] = (245, 245, 245)
    texture_blur_radius: int = 2
    texture_strength: float = 0.18
    singular_epsilon: float = 1e-8


@dataclass(frozen=True)
class WritebackConfig:
    """Constants for the simple solid-fill write-back."""
    font_size_factor: float = 0.7
    min_font_size: int = 8
    width_ratio: float = 0.9
    height_ratio: float = 0.9
    line_spacing: float = 1.2


REGION_CONFIG = RegionConfig()
TEXT_GROUPING_CONFIG = TextGroupingConfig()
LAYOUT_CONFIG = LayoutConfig()
PIPELINE_CONFIG = PipelineConfig()
WRITEBACK_CONFIG = WritebackConfig()


# Tesseract traineddata identifiers mapped to two-letter language codes
TESSERACT_LANGUAGE_MAP: dict[str, str] = {
    "afr": "af", "amh": "am", "ara": "ar", "aze": "az", "bel": "be",
    "ben": "bn", "bos": "bs", "bul": "bg", "cat": "ca", "ces": "cs",
    "chi_sim": "zh", "chi_tra": "zh", "cym": "cy", "dan": "da", "deu": "de",
    "ell": "el", "eng": "en", "epo": "eo", "est": "et", "fas": "fa",
    "fin": "fi", "fra": "fr", "gle": "ga", "glg": "gl", "guj": "gu",
    "heb": "he", "hin": "hi", "hrv": "hr", "hun": "hu", "ind": "id",
    "isl": "is", "ita": "it", "jpn": "ja", "kat": "ka", "kor": "ko",
    "lav": "lv", "lit": "lt", "mal": "ml", "mar": "mr", "mkd": "mk",
    "mlt": "mt", "msa": "ms", "nld": "nl", "nor": "no", "pol": "pl",
    "por": "pt", "ron": "ro", "rus": "ru", "slk": "sk", "slv": "sl",
    "spa": "es", "sqi": "sq", "srp": "sr", "swe": "sv", "tam": "ta",
    "tel": "te", "tha": "th", "tur": "tr", "ukr": "uk", "urd": "ur",
    "vie": "vi",
}


# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
DEFAULT_LOG_FILE = "image_translator.log"
