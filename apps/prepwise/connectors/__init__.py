from .gemini_connector import GeminiClient, classify_ai_error
from .mongo_connector import MongoConnector

__all__ = ["GeminiClient", "MongoConnector", "classify_ai_error"]
