from __future__ import annotations

from dataclasses import dataclass

DEFAULT_VOICE = "Leda"


@dataclass(frozen=True)
class VoiceCatalogEntry:
    voice: str
    style: str


@dataclass(frozen=True)
class LanguageCatalogEntry:
    language: str
    code: str


AVAILABLE_LANGUAGES: tuple[LanguageCatalogEntry, ...] = (
    LanguageCatalogEntry("Arabic (Egyptian)", "ar-EG"),
    LanguageCatalogEntry("English (US)", "en-US"),
    LanguageCatalogEntry("French (France)", "fr-FR"),
    LanguageCatalogEntry("Indonesian (Indonesia)", "id-ID"),
    LanguageCatalogEntry("Japanese (Japan)", "ja-JP"),
    LanguageCatalogEntry("Portuguese (Brazil)", "pt-BR"),
    LanguageCatalogEntry("Dutch (Netherlands)", "nl-NL"),
    LanguageCatalogEntry("Thai (Thailand)", "th-TH"),
    LanguageCatalogEntry("Vietnamese (Vietnam)", "vi-VN"),
    LanguageCatalogEntry("Ukrainian (Ukraine)", "uk-UA"),
    LanguageCatalogEntry("English (India)", "en-IN"),
    LanguageCatalogEntry("Tamil (India)", "ta-IN"),
    LanguageCatalogEntry("German (Germany)", "de-DE"),
    LanguageCatalogEntry("Spanish (US)", "es-US"),
    LanguageCatalogEntry("Hindi (India)", "hi-IN"),
    LanguageCatalogEntry("Italian (Italy)", "it-IT"),
    LanguageCatalogEntry("Korean (Korea)", "ko-KR"),
    LanguageCatalogEntry("Russian (Russia)", "ru-RU"),
    LanguageCatalogEntry("Polish (Poland)", "pl-PL"),
    LanguageCatalogEntry("Turkish (Turkey)", "tr-TR"),
    LanguageCatalogEntry("Romanian (Romania)", "ro-RO"),
    LanguageCatalogEntry("Bengali (Bangladesh)", "bn-BD"),
    LanguageCatalogEntry("Marathi (India)", "mr-IN"),
    LanguageCatalogEntry("Telugu (India)", "te-IN"),
)

AVAILABLE_VOICES: tuple[VoiceCatalogEntry, ...] = (
    VoiceCatalogEntry("Zephyr", "Bright"),
    VoiceCatalogEntry("Kore", "Firm"),
    VoiceCatalogEntry("Orus", "Firm"),
    VoiceCatalogEntry("Autonoe", "Bright"),
    VoiceCatalogEntry("Umbriel", "Easy-going"),
    VoiceCatalogEntry("Erinome", "Clear"),
    VoiceCatalogEntry("Laomedeia", "Upbeat"),
    VoiceCatalogEntry("Schedar", "Even"),
    VoiceCatalogEntry("Achird", "Friendly"),
    VoiceCatalogEntry("Sadachbia", "Lively"),
    VoiceCatalogEntry("Puck", "Upbeat"),
    VoiceCatalogEntry("Fenrir", "Excitable"),
    VoiceCatalogEntry("Aoede", "Breezy"),
    VoiceCatalogEntry("Enceladus", "Breathy"),
    VoiceCatalogEntry("Algieba", "Smooth"),
    VoiceCatalogEntry("Algenib", "Gravelly"),
    VoiceCatalogEntry("Achernar", "Soft"),
    VoiceCatalogEntry("Gacrux", "Mature"),
    VoiceCatalogEntry("Zubenelgenubi", "Casual"),
    VoiceCatalogEntry("Sadaltager", "Knowledgeable"),
    VoiceCatalogEntry("Charon", "Informative"),
    VoiceCatalogEntry("Leda", "Youthful"),
    VoiceCatalogEntry("Callirrhoe", "Easy-going"),
    VoiceCatalogEntry("Iapetus", "Clear"),
    VoiceCatalogEntry("Despina", "Smooth"),
    VoiceCatalogEntry("Rasalgethi", "Informative"),
    VoiceCatalogEntry("Alnilam", "Firm"),
    VoiceCatalogEntry("Pulcherrima", "Forward"),
    VoiceCatalogEntry("Vindemiatrix", "Gentle"),
    VoiceCatalogEntry("Sulafat", "Warm"),
)

VALID_LANGUAGE_CODES: frozenset[str] = frozenset(entry.code for entry in AVAILABLE_LANGUAGES)
VOICE_NAMES: frozenset[str] = frozenset(entry.voice for entry in AVAILABLE_VOICES)


def language_codes() -> list[str]:
    """Valid codes in catalog order."""
    return [entry.code for entry in AVAILABLE_LANGUAGES]
