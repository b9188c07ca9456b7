"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- FetchConfig: HTTP fetching settings
- ExtractConfig: Article extraction heuristic settings
- ExportConfig: Rendering and transient storage settings
- ServerConfig: HTTP server settings
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Any

import yaml


@dataclass
class FetchConfig:
    """Configuration for HTTP page fetching.

    Attributes:
        timeout_seconds: HTTP request timeout
        max_redirects: Maximum number of redirect hops to follow
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
        accept_language: Accept-Language header, biased to the target locale
    """

    timeout_seconds: float = 15.0
    max_redirects: int = 5
    trust_env: bool = True
    user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64)"
    accept_language: str = "id-ID,id;q=0.9"


@dataclass
class ExtractConfig:
    """Configuration for article extraction.

    Attributes:
        min_paragraph_chars: Paragraphs must be strictly longer than this
        placeholder_title: Title used when the page has none
    """

    min_paragraph_chars: int = 40
    placeholder_title: str = "Untitled"


@dataclass
class ExportConfig:
    """Configuration for rendering downloadable files.

    Attributes:
        storage_dir: Directory holding rendered files until they are delivered
        cleanup_delay_seconds: Grace delay between delivery and deletion
        pdf_browser_args: Extra Chromium launch arguments for PDF rendering
    """

    storage_dir: str = "temp"
    cleanup_delay_seconds: float = 3.0
    pdf_browser_args: list[str] = field(default_factory=lambda: ["--no-sandbox"])


@dataclass
class ServerConfig:
    """Configuration for the HTTP server.

    Attributes:
        host: Interface to bind
        port: TCP port to listen on (PORT environment variable overrides)
        static_dir: Directory served as static files when it exists
    """

    host: str = "0.0.0.0"
    port: int = 5000
    static_dir: str = "public"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "server.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    extract: ExtractConfig = field(default_factory=ExtractConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return _apply_env(AppConfig())

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _apply_env(_merge_config(AppConfig(), raw))


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            known = {k: v for k, v in value.items() if k in data[key]}
            data[key].update(known)
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "fetch": {
            "timeout_seconds": cfg.fetch.timeout_seconds,
            "max_redirects": cfg.fetch.max_redirects,
            "trust_env": cfg.fetch.trust_env,
            "user_agent": cfg.fetch.user_agent,
            "accept_language": cfg.fetch.accept_language,
        },
        "extract": {
            "min_paragraph_chars": cfg.extract.min_paragraph_chars,
            "placeholder_title": cfg.extract.placeholder_title,
        },
        "export": {
            "storage_dir": cfg.export.storage_dir,
            "cleanup_delay_seconds": cfg.export.cleanup_delay_seconds,
            "pdf_browser_args": list(cfg.export.pdf_browser_args),
        },
        "server": {
            "host": cfg.server.host,
            "port": cfg.server.port,
            "static_dir": cfg.server.static_dir,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        fetch=FetchConfig(**data["fetch"]),
        extract=ExtractConfig(**data["extract"]),
        export=ExportConfig(**data["export"]),
        server=ServerConfig(**data["server"]),
        logging=LoggingConfig(**data["logging"]),
    )


def _apply_env(cfg: AppConfig) -> AppConfig:
    port = os.getenv("PORT")
    if port:
        cfg.server.port = int(port)
    return cfg
