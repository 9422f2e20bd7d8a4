"""
Configuration Management for StudyQA

Loads configuration from ~/.studyqa/config.json and environment variables.
"""

import os
import json
import logging
from pathlib import Path
from dataclasses import dataclass, field

logger = logging.getLogger("studyqa.config")

# Default config paths
CONFIG_DIR = Path.home() / ".studyqa"
CONFIG_PATH = CONFIG_DIR / "config.json"


@dataclass
class RetrieverConfig:
    """Passage retrieval configuration"""
    min_sentence_length: int = 20  # sentences must be longer than this
    min_keyword_length: int = 3  # keywords must be longer than this
    top_k: int = 3


@dataclass
class SynthesizerConfig:
    """Answer synthesis tuning constants"""
    no_match_confidence: float = 0.1
    fallback_base_confidence: float = 0.4
    fallback_confidence_step: float = 0.1  # added per retrieved passage
    fallback_confidence_cap: float = 0.9
    answer_excerpt_length: int = 200
    context_excerpt_length: int = 150


@dataclass
class SessionConfig:
    """Question-answering session configuration"""
    latency_seconds: float = 1.5  # simulated inference time


@dataclass
class ServerConfig:
    """HTTP server configuration"""
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"


@dataclass
class StudyQAConfig:
    """Main StudyQA configuration"""
    retriever: RetrieverConfig = field(default_factory=RetrieverConfig)
    synthesizer: SynthesizerConfig = field(default_factory=SynthesizerConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def _parse_retriever_config(data: dict) -> RetrieverConfig:
    """Parse retriever section from config dict"""
    retriever_data = data.get("retriever", {})
    return RetrieverConfig(
        min_sentence_length=retriever_data.get("min_sentence_length", 20),
        min_keyword_length=retriever_data.get("min_keyword_length", 3),
        top_k=retriever_data.get("top_k", 3),
    )


def _parse_synthesizer_config(data: dict) -> SynthesizerConfig:
    """Parse synthesizer section from config dict"""
    synth_data = data.get("synthesizer", {})
    return SynthesizerConfig(
        no_match_confidence=synth_data.get("no_match_confidence", 0.1),
        fallback_base_confidence=synth_data.get("fallback_base_confidence", 0.4),
        fallback_confidence_step=synth_data.get("fallback_confidence_step", 0.1),
        fallback_confidence_cap=synth_data.get("fallback_confidence_cap", 0.9),
        answer_excerpt_length=synth_data.get("answer_excerpt_length", 200),
        context_excerpt_length=synth_data.get("context_excerpt_length", 150),
    )


def _parse_session_config(data: dict) -> SessionConfig:
    """Parse session section from config dict"""
    session_data = data.get("session", {})
    return SessionConfig(
        latency_seconds=session_data.get("latency_seconds", 1.5),
    )


def _parse_server_config(data: dict) -> ServerConfig:
    """Parse server section from config dict"""
    server_data = data.get("server", {})
    return ServerConfig(
        host=server_data.get("host", "127.0.0.1"),
        port=server_data.get("port", 8000),
        log_level=server_data.get("log_level", "INFO"),
    )


def get_config_path() -> Path:
    """Config file location, honouring STUDYQA_CONFIG"""
    override = os.getenv("STUDYQA_CONFIG")
    if override:
        return Path(os.path.expanduser(override))
    return CONFIG_PATH


def _env_number(name: str, cast):
    """Numeric env var, or None when unset or unparsable"""
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a valid %s", name, raw, cast.__name__)
        return None


def load_config() -> StudyQAConfig:
    """
    Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file (~/.studyqa/config.json)
    3. Default values
    """
    config = StudyQAConfig()
    config_path = get_config_path()

    # Load from config file if exists
    if config_path.exists():
        try:
            with open(config_path) as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")

            config.retriever = _parse_retriever_config(data)
            config.synthesizer = _parse_synthesizer_config(data)
            config.session = _parse_session_config(data)
            config.server = _parse_server_config(data)
        except (ValueError, AttributeError, IOError) as e:
            # JSONDecodeError is a ValueError; AttributeError covers non-object sections
            logger.warning("Failed to load config file %s: %s", config_path, e)
            config = StudyQAConfig()

    # Environment variable overrides
    latency = _env_number("STUDYQA_LATENCY_SECONDS", float)
    if latency is not None:
        config.session.latency_seconds = latency
    top_k = _env_number("STUDYQA_TOP_K", int)
    if top_k is not None:
        config.retriever.top_k = top_k

    if os.getenv("STUDYQA_HOST"):
        config.server.host = os.getenv("STUDYQA_HOST")
    port = _env_number("STUDYQA_PORT", int)
    if port is not None:
        config.server.port = port
    if os.getenv("STUDYQA_LOG_LEVEL"):
        config.server.log_level = os.getenv("STUDYQA_LOG_LEVEL").upper()

    return config


def save_config(config: StudyQAConfig) -> None:
    """Save configuration to file."""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "retriever": {
            "min_sentence_length": config.retriever.min_sentence_length,
            "min_keyword_length": config.retriever.min_keyword_length,
            "top_k": config.retriever.top_k,
        },
        "synthesizer": {
            "no_match_confidence": config.synthesizer.no_match_confidence,
            "fallback_base_confidence": config.synthesizer.fallback_base_confidence,
            "fallback_confidence_step": config.synthesizer.fallback_confidence_step,
            "fallback_confidence_cap": config.synthesizer.fallback_confidence_cap,
            "answer_excerpt_length": config.synthesizer.answer_excerpt_length,
            "context_excerpt_length": config.synthesizer.context_excerpt_length,
        },
        "session": {
            "latency_seconds": config.session.latency_seconds,
        },
        "server": {
            "host": config.server.host,
            "port": config.server.port,
            "log_level": config.server.log_level,
        },
    }

    with open(config_path, "w") as f:
        json.dump(data, f, indent=2)
