"""Named mutations, reachable by name from ``POST /actions/{name}`` and the REST routes."""

from __future__ import annotations

from potluck.core.errors import NotFoundError
from potluck.services.mutations import days, events, ingredients, items, meals, people
from potluck.services.pipeline import MutationSpec

REGISTRY: dict[str, MutationSpec] = {
    mutation.name: mutation
    for module in (events, days, meals, items, ingredients, people)
    for mutation in module.MUTATIONS
}


def get_mutation(name: str) -> MutationSpec:
    try:
        return REGISTRY[name]
    except KeyError:
        raise NotFoundError("mutations", name) from None


def run_mutation(pipeline, name: str, payload: dict | None, credentials, meta, **fields):
    """Execute ``name`` with ``payload``; path parameters in ``fields`` override body values."""

    raw = dict(payload or {})
    raw.update(fields)
    return pipeline.execute(get_mutation(name), raw, credentials, meta)
