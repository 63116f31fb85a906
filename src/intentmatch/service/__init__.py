"""Service layer - wiring of configuration into runnable components.

- build_knowledge_base: Populate entries from configuration
- build_matcher: Create an eagerly embedded IntentMatcher
"""

from intentmatch.service.matcher import build_knowledge_base, build_matcher, provider_config_from

__all__ = [
    "build_knowledge_base",
    "build_matcher",
    "provider_config_from",
]
