from __future__ import annotations

from typing import Dict, Iterable, List, Mapping

from codefresh_sync.models import Variable


def variables_to_list(mapping: Mapping[str, str]) -> List[Variable]:
    """Declarative ``{key: value}`` map to the API's list of pairs (sorted by key)."""
    return [Variable(key=k, value=str(v)) for k, v in sorted(mapping.items())]


def variables_to_map(variables: Iterable[Variable]) -> Dict[str, str]:
    return {v.key: v.value for v in variables}


__all__ = ["variables_to_list", "variables_to_map"]
