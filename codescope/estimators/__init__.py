"""Optional learned estimators, their gateway and feature extraction."""

from .base import (
    Estimate,
    Estimator,
    EstimatorGateway,
    Estimators,
    FunctionEstimator,
    NullEstimator,
)
from .features import FeatureExtractor, one_hot

__all__ = [
    'Estimate',
    'Estimator',
    'EstimatorGateway',
    'Estimators',
    'FunctionEstimator',
    'NullEstimator',
    'FeatureExtractor',
    'one_hot',
]
