from backend.app.models.feature import Feature, FeatureComment, FeatureVote

__all__ = [
    "Feature",
    "FeatureVote",
    "FeatureComment",
]
