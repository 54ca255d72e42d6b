"""
Prompt Template Engine for dynamic prompt generation.
Handles template loading, rendering, and validation.
"""
import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import Environment, StrictUndefined, TemplateError

from ...core.exceptions import ConfigError
from ...utils.logging import CorrelatedLogger


@dataclass
class PromptConfig:
    """Configuration for a complete prompt template."""
    system_role: str
    instruction: str
    requirements: List[str] = field(default_factory=list)


@dataclass
class RenderedPrompt:
    """System and user messages ready to send."""
    system: str
    user: str

    def as_messages(self) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


class PromptTemplateEngine:
    """
    Template engine for managing and rendering generation prompts.

    Each prompt lives in ``prompts/<prompt_type>.yaml`` with a system role,
    a Jinja2 instruction template and an optional list of numbered
    requirements (also templates).
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize the template engine.

        Args:
            config_dir: Path to configuration directory. Defaults to ideator/config/
        """
        self.logger = CorrelatedLogger(__name__)

        if config_dir is None:
            config_dir = Path(__file__).parent.parent

        self.config_dir = Path(config_dir)
        self.prompts_dir = self.config_dir / "prompts"

        self.jinja_env = Environment(
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,
            undefined=StrictUndefined
        )

        self._config_cache: Dict[str, PromptConfig] = {}

    def load_prompt_config(self, prompt_type: str) -> PromptConfig:
        """
        Load prompt configuration for a prompt type.

        Raises:
            ConfigError: If configuration cannot be loaded
        """
        if prompt_type in self._config_cache:
            return self._config_cache[prompt_type]

        config_path = self.prompts_dir / f"{prompt_type}.yaml"
        if not config_path.exists():
            raise ConfigError(
                f"prompt:{prompt_type}",
                f"Prompt configuration not found: {config_path}. "
                f"Available: {', '.join(self.get_available_prompt_types())}"
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"prompt:{prompt_type}", str(e))

        config = PromptConfig(
            system_role=config_data.get("system_role", "").strip(),
            instruction=config_data.get("instruction", "").strip(),
            requirements=list(config_data.get("requirements") or [])
        )
        if not config.instruction:
            raise ConfigError(f"prompt:{prompt_type}", "instruction cannot be empty")

        self._config_cache[prompt_type] = config
        self.logger.debug(f"Loaded prompt configuration: {prompt_type}")
        return config

    def render_prompt(self, prompt_type: str, **template_vars: Any) -> RenderedPrompt:
        """
        Render the system and user messages for a prompt type.

        Args:
            prompt_type: Prompt name (e.g., 'concepts', 'production_plan')
            **template_vars: Variables to pass to the templates
        """
        config = self.load_prompt_config(prompt_type)

        try:
            parts = [self._render(config.instruction, template_vars)]
            if config.requirements:
                parts.append("")
                for number, requirement in enumerate(config.requirements, 1):
                    parts.append(f"{number}. {self._render(requirement, template_vars)}")

            rendered = RenderedPrompt(
                system=self._render(config.system_role, template_vars),
                user="\n".join(parts)
            )
        except TemplateError as e:
            self.logger.error(f"Failed to render prompt: {prompt_type} - {str(e)}")
            raise ConfigError(f"prompt:{prompt_type}", f"Prompt rendering failed: {str(e)}")

        self.logger.debug(f"Rendered prompt for {prompt_type} ({len(rendered.user)} chars)")
        return rendered

    def _render(self, source: str, template_vars: Dict[str, Any]) -> str:
        return self.jinja_env.from_string(source).render(**template_vars).strip()

    def get_available_prompt_types(self) -> List[str]:
        """Get list of available prompt types."""
        if not self.prompts_dir.exists():
            return []
        return sorted(p.stem for p in self.prompts_dir.glob("*.yaml"))


# Global template engine instance
_template_engine = None

def get_template_engine() -> PromptTemplateEngine:
    """Get global template engine instance (singleton pattern)."""
    global _template_engine
    if _template_engine is None:
        _template_engine = PromptTemplateEngine()
    return _template_engine
