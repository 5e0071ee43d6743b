from .feedback_persistence import FeedbackPersistence

__all__ = ["FeedbackPersistence"]
