"""
Analyzer package for SDK Change Analyzer.

This package contains modules for:
- Wrapper import profiling
- Change-to-wrapper correlation
- Risk scoring
- Report assembly
"""

from sdk_change_analyzer.analyzer.change_analyzer import ChangeAnalyzer
from sdk_change_analyzer.analyzer.change_correlator import ChangeCorrelator
from sdk_change_analyzer.analyzer.import_graph import ImportGraphAnalyzer
from sdk_change_analyzer.analyzer.risk_scorer import RiskScorer

__all__ = [
    "ChangeAnalyzer",
    "ChangeCorrelator",
    "ImportGraphAnalyzer",
    "RiskScorer",
]
