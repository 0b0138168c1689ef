from .accessor_synthesizer import AccessorSynthesizer, build_predicate
from .handler_resolution import (
    bindings_from_handles,
    resolve_bindings,
    resolve_handler_spec,
    resolve_handles,
)

__all__ = [
    "AccessorSynthesizer",
    "build_predicate",
    "bindings_from_handles",
    "resolve_bindings",
    "resolve_handler_spec",
    "resolve_handles",
]
