"""
Prompt Template Engine for dynamic prompt generation.
Handles template loading, rendering, and validation.
"""
import yaml
from typing import Dict, Any, Optional, List
from pathlib import Path
from jinja2 import Environment, StrictUndefined
from dataclasses import dataclass

from seo_grader.core.exceptions import ConfigurationError
from seo_grader.utils.logging import CorrelatedLogger


@dataclass
class PromptConfig:
    """Configuration for a complete prompt template."""
    system_role: str
    instruction: str
    response_format: Dict[str, str]


class PromptTemplateEngine:
    """
    Template engine for managing and rendering LLM prompts.

    Features:
    - One YAML file per prompt under config/prompts/
    - Dynamic template rendering with Jinja2
    - Validation of loaded configurations
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize the template engine.

        Args:
            config_dir: Path to configuration directory. Defaults to seo_grader/config/
        """
        self.logger = CorrelatedLogger(__name__)

        # Set up configuration directory
        if config_dir is None:
            config_dir = Path(__file__).parent.parent

        self.config_dir = Path(config_dir)
        self.prompts_dir = self.config_dir / "prompts"

        # Initialize Jinja2 environment
        self.jinja_env = Environment(
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,
            undefined=StrictUndefined
        )

        # Cache for loaded configurations
        self._config_cache: Dict[str, PromptConfig] = {}

        self.logger.info(f"PromptTemplateEngine initialized with config_dir: {config_dir}")

    def load_prompt_config(self, prompt_name: str) -> PromptConfig:
        """
        Load prompt configuration by name.

        Args:
            prompt_name: Name of the prompt (e.g., 'grading')

        Returns:
            PromptConfig object with loaded configuration

        Raises:
            ConfigurationError: If configuration cannot be loaded
        """
        if prompt_name in self._config_cache:
            return self._config_cache[prompt_name]

        config_path = self.prompts_dir / f"{prompt_name}.yaml"

        if not config_path.exists():
            raise ConfigurationError(
                f"prompt '{prompt_name}'",
                f"Prompt configuration not found: {config_path}. Available: {self.get_available_prompts()}"
            )

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"prompt '{prompt_name}'", str(e))

        config = self._build_prompt_config(config_data)
        self._validate_config(prompt_name, config)

        # Cache the configuration
        self._config_cache[prompt_name] = config

        self.logger.info(f"Loaded prompt configuration: {prompt_name}")
        return config

    def render_prompt(self, prompt_name: str, **template_vars) -> str:
        """
        Render the user prompt: instruction followed by response format instructions.

        Args:
            prompt_name: Name of the prompt (e.g., 'grading')
            **template_vars: Variables to pass to the template

        Returns:
            Rendered prompt string
        """
        config = self.load_prompt_config(prompt_name)

        parts = [self._render(prompt_name, config.instruction, template_vars)]
        format_instruction = config.response_format.get('instruction')
        if format_instruction:
            parts.append(self._render(prompt_name, format_instruction, template_vars))

        full_prompt = "\n".join(part.strip() for part in parts if part.strip())
        self.logger.debug(f"Rendered prompt for {prompt_name} ({len(full_prompt)} chars)")
        return full_prompt

    def render_system_role(self, prompt_name: str, **template_vars) -> str:
        """Render the system message of a prompt."""
        config = self.load_prompt_config(prompt_name)
        return self._render(prompt_name, config.system_role, template_vars).strip()

    def get_available_prompts(self) -> List[str]:
        """Get list of available prompt names."""
        if not self.prompts_dir.exists():
            return []
        return sorted(item.stem for item in self.prompts_dir.glob("*.yaml"))

    def _render(self, prompt_name: str, source: str, template_vars: Dict[str, Any]) -> str:
        try:
            return self.jinja_env.from_string(source).render(**template_vars)
        except Exception as e:
            self.logger.error(f"Failed to render prompt: {prompt_name} - {str(e)}")
            raise ConfigurationError(f"prompt '{prompt_name}'", f"Prompt rendering failed: {str(e)}")

    def _validate_config(self, prompt_name: str, config: PromptConfig) -> None:
        """Basic validation checks of a loaded configuration."""
        if not config.system_role.strip():
            raise ConfigurationError(f"prompt '{prompt_name}'", "system_role cannot be empty")

        if not config.instruction.strip():
            raise ConfigurationError(f"prompt '{prompt_name}'", "instruction cannot be empty")

    def _build_prompt_config(self, config_data: Dict[str, Any]) -> PromptConfig:
        """Build PromptConfig object from raw configuration data."""
        return PromptConfig(
            system_role=config_data.get('system_role', '') or '',
            instruction=config_data.get('instruction', '') or '',
            response_format=config_data.get('response_format', {}) or {}
        )


# Global template engine instance
_template_engine = None

def get_template_engine() -> PromptTemplateEngine:
    """Get global template engine instance (singleton pattern)."""
    global _template_engine
    if _template_engine is None:
        _template_engine = PromptTemplateEngine()
    return _template_engine
