"""
Competency metrics pipeline components.

Modules:
    base: Abstract base class for the extractors
    runner: Orchestrator for extract -> gap -> enrich -> publish
    scheduler: APScheduler integration for periodic batch runs

Subpackages:
    clients: Upstream HTTP query client and column-family store reader
    extractors: One extractor per source table
    transformers: Field parsing, completion status, gap calculation, gap enrichment
    loaders: Topic publisher (database outbox)

Architecture:
    1. Extract - seven sources, each normalized into one table
    2. Gap - expected vs declared competency levels
    3. Enrich - best completion on qualifying live courses per gap
    4. Publish - all tables with one run timestamp, in one transaction

    Upstream failures abort the run before anything is published. A single
    malformed embedded document only drops the record it belongs to.

Usage:
    from ingestion.runner import CompetencyMetricsRunner
    from ingestion.clients.store import TableReader
    from ingestion.clients.http_api import UpstreamAPI

Example:
    runner = CompetencyMetricsRunner(session, TableReader(store_sessions), UpstreamAPI(), settings)
    result = await runner.run()

    print(f"Published {result['records_published']} records")
"""

__all__ = [
    "DataSource",
    "CompetencyMetricsRunner",
    "ETLScheduler",
    "TableReader",
    "UpstreamAPI",
    "TopicPublisher",
]
