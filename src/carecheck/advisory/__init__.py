"""
CareCheck Advisory

External opinion services consulted by the criterion evaluator.
"""
from .openai_advisory import OpenAIAdvisoryService, build_reference_text, parse_opinion
from .protocol import AdvisoryService

__all__ = [
    "AdvisoryService",
    "OpenAIAdvisoryService",
    "build_reference_text",
    "parse_opinion",
]
