"""
Configuration

Settings live in an optional YAML file. Anything missing falls back to the
defaults below; the API key also falls back to ANTHROPIC_API_KEY.

Example:

    model: claude-sonnet-4-20250514
    backup: true
    features:
      split:
        chunk_size: 1500
      cosmetic:
        dictionary:
          warhamer: Warhammer
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import os

import yaml

from notecraft.errors import ConfigurationError
from notecraft.llm.client import LLMConfig
from notecraft.llm.prompts import DEFAULT_PROMPTS, format_dictionary

FEATURES = ("punctuate", "split", "summarize", "cosmetic")

DEFAULT_CHUNK_SIZES: Dict[str, int] = {
    "punctuate": 1000,
    "split": 1000,
    "summarize": 5000,
    "cosmetic": 1000,
}

API_KEY_ENV = "ANTHROPIC_API_KEY"


@dataclass
class FeatureConfig:
    """Per-feature settings."""
    chunk_size: int = 1000
    prompt: Optional[str] = None           # Overrides the default system prompt
    preserve_headings: bool = True         # punctuate: keep "#" markers when stripping
    dictionary: Dict[str, str] = field(default_factory=dict)  # cosmetic: key -> value


def _default_features() -> Dict[str, FeatureConfig]:
    return {name: FeatureConfig(chunk_size=DEFAULT_CHUNK_SIZES[name]) for name in FEATURES}


@dataclass
class ProcessingConfig:
    """Configuration for a notecraft run."""
    # API config
    api_key: str = ""
    model: str = "claude-sonnet-4-20250514"
    temperature: float = 0.1
    top_p: Optional[float] = None
    max_tokens: int = 4096

    # Hard ceiling on chunk iterations per document
    max_iterations: int = 100

    # Debug transform logs
    debug: bool = False
    log_dir: str = "./notecraft_logs"

    # Backup before a destructive run
    backup: bool = False
    backup_dir: Optional[str] = None

    features: Dict[str, FeatureConfig] = field(default_factory=_default_features)

    def feature(self, name: str) -> FeatureConfig:
        if name not in FEATURES:
            raise ConfigurationError(f"Unknown feature: {name}")
        return self.features.setdefault(name, FeatureConfig(chunk_size=DEFAULT_CHUNK_SIZES[name]))

    def system_prompt(self, name: str) -> str:
        """Effective system prompt; a non-empty cosmetic dictionary is appended under a "Dictionary:" header."""
        feature = self.feature(name)
        prompt = feature.prompt or DEFAULT_PROMPTS[name]
        if name == "cosmetic" and feature.dictionary:
            prompt = prompt + "\n\nDictionary:\n" + format_dictionary(feature.dictionary)
        return prompt

    def llm_config(self) -> LLMConfig:
        return LLMConfig(
            api_key=self.api_key,
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            top_p=self.top_p,
        )

    def validate(self, require_api_key: bool = True) -> None:
        """Raise ConfigurationError before any processing starts."""
        if require_api_key and not self.api_key:
            raise ConfigurationError(
                f"Anthropic API key not found. Set {API_KEY_ENV} or api_key in the config file."
            )
        for name, feature in self.features.items():
            if name not in FEATURES:
                raise ConfigurationError(f"Unknown feature: {name}")
            if feature.chunk_size <= 0:
                raise ConfigurationError(f"{name}.chunk_size must be positive, got {feature.chunk_size}")
        if self.max_tokens <= 0:
            raise ConfigurationError(f"max_tokens must be positive, got {self.max_tokens}")
        if self.max_iterations <= 0:
            raise ConfigurationError(f"max_iterations must be positive, got {self.max_iterations}")


def _load_feature(name: str, data: Dict[str, Any]) -> FeatureConfig:
    if not isinstance(data, dict):
        raise ConfigurationError(f"features.{name} must be a mapping")
    dictionary = data.get("dictionary") or {}
    if not isinstance(dictionary, dict):
        raise ConfigurationError(f"features.{name}.dictionary must be a mapping")
    try:
        chunk_size = int(data.get("chunk_size", DEFAULT_CHUNK_SIZES[name]))
    except (TypeError, ValueError):
        raise ConfigurationError(f"features.{name}.chunk_size must be an integer")
    return FeatureConfig(
        chunk_size=chunk_size,
        prompt=data.get("prompt") or None,
        preserve_headings=bool(data.get("preserve_headings", True)),
        dictionary={str(k): str(v) for k, v in dictionary.items()},
    )


def config_from_dict(data: Dict[str, Any]) -> ProcessingConfig:
    config = ProcessingConfig()
    config.api_key = str(data.get("api_key") or os.environ.get(API_KEY_ENV, "") or "")
    config.model = str(data.get("model", config.model))
    config.temperature = float(data.get("temperature", config.temperature))
    top_p = data.get("top_p")
    config.top_p = None if top_p is None else float(top_p)
    config.max_tokens = int(data.get("max_tokens", config.max_tokens))
    config.max_iterations = int(data.get("max_iterations", config.max_iterations))
    config.debug = bool(data.get("debug", False))
    config.log_dir = str(data.get("log_dir", config.log_dir))
    config.backup = bool(data.get("backup", False))
    config.backup_dir = data.get("backup_dir") or None

    features = data.get("features") or {}
    if not isinstance(features, dict):
        raise ConfigurationError("features must be a mapping")
    for name, feature_data in features.items():
        if name not in FEATURES:
            raise ConfigurationError(f"Unknown feature in config: {name}")
        config.features[name] = _load_feature(name, feature_data or {})
    return config


def load_config(path: Optional[str] = None) -> ProcessingConfig:
    """Load configuration from a YAML file, or defaults when path is None."""
    if path is None:
        return config_from_dict({})
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return config_from_dict(data)
