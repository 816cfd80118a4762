"""Aspect registry — the lookup table the orchestrator resolves aspects from."""

from __future__ import annotations

from licenseaspect.aspect import Aspect
from licenseaspect.exceptions import AspectNotFoundError

ASPECT_REGISTRY: dict[str, Aspect] = {}


def register_aspect(aspect: Aspect) -> None:
    """Register an aspect instance by its name, replacing any previous one."""
    ASPECT_REGISTRY[aspect.name] = aspect


def get_aspect(name: str) -> Aspect:
    try:
        return ASPECT_REGISTRY[name]
    except KeyError:
        raise AspectNotFoundError(f"no aspect registered as {name!r}") from None


def registered_aspects() -> list[Aspect]:
    """Registered aspects, sorted by name."""
    return [ASPECT_REGISTRY[name] for name in sorted(ASPECT_REGISTRY)]
