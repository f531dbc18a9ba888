"""Translation adapters - implementations of the TextTranslator port."""

from .dictionary_translator import DictionaryTranslator

__all__ = ['DictionaryTranslator']
