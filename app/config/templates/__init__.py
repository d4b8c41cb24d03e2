"""Prompt templates for caption style analysis."""

from .prompt_templates import PromptTemplateEngine, get_template_engine

__all__ = ['PromptTemplateEngine', 'get_template_engine']
