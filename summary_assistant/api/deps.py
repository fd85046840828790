"""Service wiring shared by the HTTP handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx
from starlette.requests import Request

from summary_assistant.audit.classifier import AuditService
from summary_assistant.audit.export import ExportCache, TrainingDataExporter
from summary_assistant.config import Settings
from summary_assistant.log import SummaryLogger
from summary_assistant.summarizer.gateway import ApiGateway
from summary_assistant.summarizer.generator import RetryingSummaryGenerator, SummaryService
from summary_assistant.summarizer.prompts import PromptBuilder
from summary_assistant.summarizer.rate_limit import RateLimiter
from summary_assistant.summarizer.store import InMemoryPostRepository


@dataclass
class Services:
    settings: Settings
    repository: InMemoryPostRepository
    summaries: SummaryService
    audit: AuditService
    exporter: TrainingDataExporter
    exports: ExportCache


def build_services(
    settings: Settings,
    repository: Optional[InMemoryPostRepository] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    rate_limiter: Optional[RateLimiter] = None,
) -> Services:
    if repository is None:
        if settings.data_file:
            repository = InMemoryPostRepository.from_yaml(settings.data_file)
        else:
            repository = InMemoryPostRepository()

    summary_logger = SummaryLogger(settings.debug_mode)
    gateway = ApiGateway(settings, summary_logger, transport=transport)
    generator = RetryingSummaryGenerator.from_settings(gateway, settings, summary_logger)
    summaries = SummaryService(
        settings,
        generator,
        rate_limiter or RateLimiter.from_settings(settings),
        repository,
        summary_logger,
    )
    return Services(
        settings=settings,
        repository=repository,
        summaries=summaries,
        audit=AuditService(repository),
        exporter=TrainingDataExporter(
            repository, PromptBuilder(settings.system_prompt), settings.word_limit
        ),
        exports=ExportCache(settings.export_ttl_seconds),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services
