"""Spec → YAML / JSON serializers.

Both formats are written from the same camelCase dict, in schema field
order, so a JSON document loaded back through ``Spec.model_validate``
compares equal to the record it came from.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import yaml

if TYPE_CHECKING:
    from .schema import Spec

__all__ = ["to_json", "to_yaml"]


class _NoAliasDumper(yaml.SafeDumper):
    """SafeDumper that never emits anchors/aliases for repeated values."""

    def ignore_aliases(self, data) -> bool:
        return True


def to_yaml(spec: Spec) -> str:
    """Serialize a Spec as block-style YAML."""
    return yaml.dump(
        spec.to_dict(),
        Dumper=_NoAliasDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        indent=2,
        width=120,
    )


def to_json(spec: Spec) -> str:
    """Serialize a Spec as 2-space indented JSON."""
    return json.dumps(spec.to_dict(), indent=2, ensure_ascii=False)
