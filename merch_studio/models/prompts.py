from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any
import yaml
import jinja2
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PromptConfig:
    """One versioned mockup prompt, e.g. enhance/merch@v1."""
    name: str
    version: str
    system_template: str
    user_template: str
    products: Dict[str, str] = field(default_factory=dict) #product type value -> mockup description

    @property
    def ref(self) -> str:
        return f"{self.name}@{self.version}"

    def describe(self, product_type: str) -> str:
        return self.products.get(product_type, product_type.replace("_", " "))


def _read_prompt_dir(name: str, version: str, prompt_path: Path) -> PromptConfig:
    templates = {}
    for part in ("system", "user"):
        template_path = prompt_path / f"{part}.j2"
        if not template_path.exists():
            raise FileNotFoundError(f"Template file not found: {template_path}")
        templates[part] = template_path.read_text()

    settings = {}
    config_path = prompt_path / "config.yaml"
    if config_path.exists():
        settings = yaml.safe_load(config_path.read_text()) or {}

    return PromptConfig(
        name=name,
        version=version,
        system_template=templates["system"],
        user_template=templates["user"],
        products=settings.get("products") or {},
    )


class PromptManager:
    """
    Loads mockup prompts from ``<prompts_dir>/<name>/<version>/`` and renders
    them into the single instruction string image models accept.

    Prompts are read once per ref; edits on disk need a restart.
    """

    def __init__(self, prompts_dir: Path):
        self.prompts_dir = Path(prompts_dir)
        if not self.prompts_dir.exists():
            raise FileNotFoundError(f"Prompts dir not found: {self.prompts_dir}")

        # StrictUndefined turns a missing variable into an error instead of an empty string
        self.jinja_env = jinja2.Environment(undefined=jinja2.StrictUndefined, trim_blocks=True, lstrip_blocks=True)
        self._loaded: Dict[str, PromptConfig] = {}

    def load_prompt(self, prompt_ref: str) -> PromptConfig:
        if prompt_ref not in self._loaded:
            name, sep, version = prompt_ref.rpartition("@")
            if not sep or not name:
                raise ValueError(f"Invalid prompt reference: {prompt_ref}")

            prompt_path = self.prompts_dir / name / version
            if not prompt_path.exists():
                raise FileNotFoundError(f"Prompt not found: {prompt_path}")

            self._loaded[prompt_ref] = _read_prompt_dir(name, version, prompt_path)
            logger.info(f"Loaded prompt: {prompt_ref}")
        return self._loaded[prompt_ref]

    def render(self, prompt_ref: str, variables: Dict[str, Any]) -> str:
        config = self.load_prompt(prompt_ref)

        product_type = variables.get("product_type")
        if product_type is not None and "product_description" not in variables:
            variables = {**variables, "product_description": config.describe(product_type)}

        try:
            parts = [
                self.jinja_env.from_string(template).render(**variables).strip()
                for template in (config.system_template, config.user_template)
            ]
        except jinja2.UndefinedError as e:
            raise ValueError(f"Missing required variable in prompt {prompt_ref}: {e}") from e

        prompt = "\n\n".join(part for part in parts if part)
        logger.debug(f"Rendered {config.ref} ({len(prompt)} chars)")
        return prompt
