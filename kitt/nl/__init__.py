"""Natural-language front end: language detection and intent classification."""

from kitt.nl.intent_engine import IntentEngine, match_rule
from kitt.nl.language import LanguageDetector, LanguageTag, guess_script_language

__all__ = ["IntentEngine", "LanguageDetector", "LanguageTag", "guess_script_language", "match_rule"]
