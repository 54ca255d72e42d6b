"""Template system for dynamic prompt generation."""

from .prompt_templates import PromptTemplateEngine, RenderedPrompt, get_template_engine

__all__ = ['PromptTemplateEngine', 'RenderedPrompt', 'get_template_engine']
