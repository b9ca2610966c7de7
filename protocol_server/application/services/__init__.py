from protocol_server.application.services.completion_service import (
    CompletionService,
    canned_reply,
    compare_stats,
)

__all__ = ["CompletionService", "canned_reply", "compare_stats"]
