"""Per-parse configuration.

Everything here is immutable and passed explicitly into ``parse_ssml``; there
is no module-level state a parse could observe from another.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum


class Synthesizability(Enum):
    SYNTHESIZABLE = "synthesizable"
    NON_SYNTHESIZABLE = "non-synthesizable"


CustomTagClassifier = Callable[[str], "Synthesizability | bool"]


def _coerce(result: Synthesizability | bool) -> Synthesizability:
    if isinstance(result, Synthesizability):
        return result
    return Synthesizability.SYNTHESIZABLE if result else Synthesizability.NON_SYNTHESIZABLE


@dataclass(frozen=True, slots=True)
class CustomTagPolicy:
    """Decide whether the text inside a custom element is spoken.

    ``rules`` is either a callable taking the qualified tag name, or a mapping
    from tag name to a ``Synthesizability`` or a bool. Names the mapping does
    not list fall back to ``default``.
    """

    rules: CustomTagClassifier | Mapping[str, Synthesizability | bool] | None = None
    default: Synthesizability = Synthesizability.SYNTHESIZABLE

    def __post_init__(self) -> None:
        # Snapshot mappings so later caller mutation cannot change a running parse.
        if self.rules is not None and not callable(self.rules):
            normalized = {str(name): _coerce(value) for name, value in self.rules.items()}
            object.__setattr__(self, "rules", normalized)

    def classify(self, tag_name: str) -> Synthesizability:
        rules = self.rules
        if rules is None:
            return self.default
        if callable(rules):
            return _coerce(rules(tag_name))
        return rules.get(tag_name, self.default)

    def is_synthesizable(self, tag_name: str) -> bool:
        return self.classify(tag_name) is Synthesizability.SYNTHESIZABLE


DEFAULT_CUSTOM_TAG_POLICY = CustomTagPolicy()


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Options for a single parse.

    - ``custom_tag_classifier``: a ``CustomTagPolicy``, a callable, or a
      mapping of custom tag names; see ``CustomTagPolicy``.
    - ``expand_substitutions``: when True, ``<sub>`` contributes its alias to
      the extracted text instead of its literal content.
    """

    custom_tag_classifier: CustomTagPolicy | CustomTagClassifier | Mapping[str, Synthesizability | bool] | None = None
    expand_substitutions: bool = True

    def __post_init__(self) -> None:
        classifier = self.custom_tag_classifier
        if classifier is None:
            object.__setattr__(self, "custom_tag_classifier", DEFAULT_CUSTOM_TAG_POLICY)
        elif not isinstance(classifier, CustomTagPolicy):
            object.__setattr__(self, "custom_tag_classifier", CustomTagPolicy(classifier))

    @property
    def policy(self) -> CustomTagPolicy:
        return self.custom_tag_classifier  # type: ignore[return-value]


DEFAULT_CONFIG = ParseConfig()
