"""Rule-based chart recommendations."""

from visualization_advisor.recommendation.engine import RecommendationEngine
from visualization_advisor.recommendation.models import EncodingSpec, Recommendation

__all__ = ['EncodingSpec', 'Recommendation', 'RecommendationEngine']
