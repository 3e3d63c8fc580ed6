from .enrichment import EnrichmentOutcome, enrich_and_store_note, should_enrich
from .scheduler import EnrichmentScheduler

__all__ = [
    "EnrichmentOutcome",
    "EnrichmentScheduler",
    "enrich_and_store_note",
    "should_enrich",
]
