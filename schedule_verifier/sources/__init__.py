from schedule_verifier.sources.base import EventContext, EvidenceBundle, EvidenceVerifier
from schedule_verifier.sources.live_score import LiveScoreVerifier
from schedule_verifier.sources.rss import RssVerifier
from schedule_verifier.sources.search_command import make_command_search, search_from_settings
from schedule_verifier.sources.sport_data import SportDataVerifier
from schedule_verifier.sources.static import StaticVerifier
from schedule_verifier.sources.web_search import WebSearchBudget, WebSearchVerifier

__all__ = [
    "EventContext",
    "EvidenceBundle",
    "EvidenceVerifier",
    "LiveScoreVerifier",
    "RssVerifier",
    "SportDataVerifier",
    "StaticVerifier",
    "WebSearchBudget",
    "WebSearchVerifier",
    "make_command_search",
    "search_from_settings",
]
