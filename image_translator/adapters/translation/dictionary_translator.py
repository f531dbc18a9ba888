"""Dictionary translator - answers translation requests from a lookup table."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ...application.ports.translator import TranslationRequest, TranslationResponse
from ...exceptions import TranslationError, ValidationError

logger = logging.getLogger(__name__)


class DictionaryTranslator:
    """Offline translator backed by a source-to-target mapping.
    
    Lookup order: the whole text, then each line separately. Text with no
    entry is returned unchanged, or as an empty string when
    ``passthrough`` is off.
    """
    
    def __init__(self, mapping: dict[str, str], passthrough: bool = True):
        self._mapping = {key.strip(): value for key, value in mapping.items()}
        self._passthrough = passthrough
        self._destroyed = False
    
    @classmethod
    def from_file(cls, path: Path | str, passthrough: bool = True) -> DictionaryTranslator:
        """Load a JSON object of ``{"source": "target"}`` pairs.
        
        Raises:
            ValidationError: If the file is missing or not a string mapping
        """
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ValidationError(f"Cannot read translations from {path}: {e}", field="translations") from e
        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in data.items()
        ):
            raise ValidationError(f"{path} must map strings to strings", field="translations")
        return cls(data, passthrough=passthrough)
    
    def _lookup(self, text: str) -> str | None:
        return self._mapping.get(text.strip())
    
    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        if self._destroyed:
            raise TranslationError("Translator has been destroyed.")
        
        exact = self._lookup(request.text)
        if exact is not None:
            return TranslationResponse(text=exact)
        
        lines = request.text.split("\n")
        if len(lines) > 1 and any(self._lookup(line) is not None for line in lines):
            translated = [self._translate_line(line) for line in lines]
            return TranslationResponse(text="\n".join(translated))
        
        logger.debug(f"No {request.from_lang}->{request.to_lang} entry for {request.text!r}")
        return TranslationResponse(text=request.text if self._passthrough else "")
    
    def _translate_line(self, line: str) -> str:
        found = self._lookup(line)
        if found is not None:
            return found
        return line if self._passthrough else ""
    
    def destroy(self) -> None:
        self._destroyed = True
