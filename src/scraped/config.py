"""
Configuration module for scraped.

Uses Pydantic models for validation and parsing of configuration files which
describe selectors, child selectors and request settings.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .fetch import DEFAULT_TIMEOUT, BearerTokens, RequestsFetcher
from .presets import apply_preset
from .registry import ChildScope, SelectorRegistry

logger = logging.getLogger(__name__)


class RequestConfig(BaseModel):
    """Settings for the requests made to load pages."""
    user_agent: Optional[str] = Field(None, alias="userAgent")
    # "token" for every host or "host|token" for a single host
    bearer_tokens: List[str] = Field(default_factory=list, alias="bearerTokens")
    timeout: float = DEFAULT_TIMEOUT

    model_config = ConfigDict(populate_by_name=True)


class ChildSelectorConfig(BaseModel):
    """Selectors whose hrefs point at child pages."""
    names: List[str]
    scope: ChildScope = ChildScope.ALL


class ScrapeConfig(BaseModel):
    """Main configuration class."""
    presets: List[str] = Field(default_factory=list)
    # name -> CSS pattern
    selectors: Dict[str, str] = Field(default_factory=dict)
    list_selectors: Dict[str, str] = Field(default_factory=dict, alias="listSelectors")
    child_selectors: List[ChildSelectorConfig] = Field(default_factory=list, alias="childSelectors")
    request: RequestConfig = Field(default_factory=RequestConfig)

    model_config = ConfigDict(populate_by_name=True)

    def build_registry(self, registry: Optional[SelectorRegistry] = None) -> SelectorRegistry:
        """
        Apply presets, then selectors, then child selectors to a registry.

        Raises:
            ValueError: for unknown presets
            InvalidSelectorPattern: for patterns which can't be compiled
            UnknownSelectorReference: for child selectors which aren't defined
        """
        registry = registry if registry is not None else SelectorRegistry()

        for preset in self.presets:
            logger.debug(f"Applying preset: {preset}")
            apply_preset(registry, preset)

        for name, pattern in self.selectors.items():
            registry.add_selector(name, pattern)
        for name, pattern in self.list_selectors.items():
            registry.add_list_selector(name, pattern)

        for child in self.child_selectors:
            registry.child_selectors(child.names, child.scope)

        return registry

    def build_fetcher(self) -> RequestsFetcher:
        """Build a fetcher from the request settings."""
        return RequestsFetcher(
            user_agent=self.request.user_agent,
            bearer_tokens=BearerTokens(self.request.bearer_tokens),
            timeout=self.request.timeout,
        )


def load_config(config_path: Union[str, Path]) -> ScrapeConfig:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to configuration file

    Returns:
        Parsed configuration object
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    config = ScrapeConfig.model_validate(data)

    logger.info(
        f"Loaded {len(config.selectors)} item selectors, {len(config.list_selectors)} list selectors "
        f"and {len(config.presets)} presets"
    )

    return config
