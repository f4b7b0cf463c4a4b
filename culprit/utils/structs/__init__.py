"""Structures shared by the algorithms, their results and the command line interface"""

from culprit.utils.structs.confidence_structs import (
    ConfidenceScore as ConfidenceScore,
    ConfidenceWeights as ConfidenceWeights,
    DiscoveryMethod as DiscoveryMethod,
    EvidenceStrength as EvidenceStrength,
    Priority as Priority,
    Reproducibility as Reproducibility,
    RootCauseClarity as RootCauseClarity,
)
from culprit.utils.structs.dd_structs import (
    MinimizationResult as MinimizationResult,
    TestOutcome as TestOutcome,
    UnitKind as UnitKind,
)
from culprit.utils.structs.bisect_structs import (
    BisectionResult as BisectionResult,
    BisectionState as BisectionState,
    BisectVerdict as BisectVerdict,
    Commit as Commit,
    CommitId as CommitId,
)
from culprit.utils.structs.check_structs import (
    ExecutionStatus as ExecutionStatus,
    FunctionalRegression as FunctionalRegression,
    Regression as Regression,
    RegressionKind as RegressionKind,
    RegressionVerdict as RegressionVerdict,
)
