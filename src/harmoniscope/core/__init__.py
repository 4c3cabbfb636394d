"""Core signal analysis modules."""

from harmoniscope.core.classifier import classify
from harmoniscope.core.peak import PeakEstimator
from harmoniscope.core.safety import assess
from harmoniscope.core.spectrum import SpectralAnalyzer

__all__ = ["SpectralAnalyzer", "PeakEstimator", "classify", "assess"]
