from cypherls.autocompletion.candidates import DEFAULT_CONFIG, CompletionConfig
from cypherls.autocompletion.engine import resolve_completions, text_until_position
from cypherls.autocompletion.types import NO_OPINION, CompletionResult

__all__ = [
    "DEFAULT_CONFIG",
    "NO_OPINION",
    "CompletionConfig",
    "CompletionResult",
    "resolve_completions",
    "text_until_position",
]
