"""
Prompt templates and the registry the orchestration components read them from.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from enum import Enum


class PromptVersion(Enum):
    V1_0 = "1.0"


@dataclass
class PromptTemplate:
    """
    A system context or a user prompt.

    System contexts are sent verbatim and may contain literal braces (the
    MongoDB examples do); user prompts are filled with ``format``.
    """
    content: str
    version: PromptVersion = PromptVersion.V1_0
    description: str = ""
    variables: Dict[str, Any] = field(default_factory=dict)

    def format(self, **kwargs) -> str:
        """Fill the placeholders; explicit arguments override ``variables``."""
        return self.content.format(**{**self.variables, **kwargs})


class PromptRegistry:
    """Prompts by name, each name holding one template per version."""

    def __init__(self):
        self._prompts: Dict[str, Dict[str, PromptTemplate]] = {}

    def register(self, name: str, prompt: PromptTemplate):
        self._prompts.setdefault(name, {})[prompt.version.value] = prompt

    def get(self, name: str, version: Optional[str] = None) -> Optional[PromptTemplate]:
        """Look up a prompt; the highest version wins when none is given."""
        versions = self._prompts.get(name)
        if not versions:
            return None

        if version:
            return versions.get(version)

        return versions[max(versions)]


prompt_registry = PromptRegistry()
