"""
Centralized constants for the analysis engine.

Keeps thresholds and weights out of the metric, similarity, security and
scoring modules. Organized by domain into namespace classes.
"""


class LineThresholds:
    LONG_LINE = 100
    LONG_FUNCTION = 50
    LOW_COMMENT_MIN_LINES = 30
    LOW_COMMENT_RATIO = 0.1


class ComplexityBands:
    # (upper bound inclusive, points) for average lines per function
    FUNCTION_LENGTH = ((20, 1), (40, 3), (80, 5))
    FUNCTION_LENGTH_MAX = 7
    # (upper bound inclusive, points) for maximum nesting depth
    NESTING = ((3, 1), (5, 3), (7, 5))
    NESTING_MAX = 7
    # (lower bound exclusive, extra points) for average cyclomatic complexity
    CYCLOMATIC = ((30, 3), (20, 2), (10, 1))


class MaintainabilityIndex:
    BASE = 171.0
    VOLUME_WEIGHT = 5.2
    CYCLOMATIC_WEIGHT = 0.23
    LOC_WEIGHT = 16.2


class FunctionComplexityWeights:
    # Per-function score in [0, 1]: weighted sum over DIVISOR
    CYCLOMATIC = 0.4
    NESTING = 0.3
    PARAMETERS = 0.1
    LENGTH = 0.2
    LENGTH_SCALE = 100
    DIVISOR = 10
    # File score in [0, 10]: sqrt(line count) weighted mean
    FILE_SCALE = 10
    HOTSPOTS = 5


class DuplicationDefaults:
    WINDOW_SIZE = 5
    MIN_BLOCK_TOKENS = 10
    MIN_BLOCK_CHARS = 20
    SIMILARITY_THRESHOLD = 0.7
    BLEND_GATE = 0.5
    NEAR_EXACT_THRESHOLD = 0.9


class DuplicationImpact:
    HIGH_MIN_LINES = 20
    MEDIUM_MIN_LINES = 10
    PERCENT_MULTIPLIER = 2
    MANY_BLOCKS = 5
    MANY_BLOCKS_BONUS = 10
    LARGE_BLOCK_LINES = 15
    LARGE_BLOCK_BONUS = 15
    MAX_SCORE = 100


class DuplicationLevels:
    HIGH_PCT = 20
    MODERATE_PCT = 10
    LOW_PCT = 5


class SecurityDeductions:
    CRITICAL = 20
    HIGH = 10
    MEDIUM = 5
    LOW = 2
    INFO = 0


class SecurityDefaults:
    RULE_CONFIDENCE = 0.8
    ESTIMATED_CONFIDENCE_FACTOR = 0.6
    LIKELIHOOD_THRESHOLD = 0.7
    HIGH_LIKELIHOOD = 0.9


class SecurityGrades:
    # (minimum score, grade)
    BANDS = ((90, 'A'), (80, 'B'), (70, 'C'), (60, 'D'))
    FAILING = 'F'


class ScoreWeights:
    CODE_STYLE = 0.25
    NAMING = 0.25
    COMPLEXITY = 0.3
    BEST_PRACTICES = 0.2
    SCALE_MAX = 10.0
    OVERALL_MULTIPLIER = 10


class ScoreDefaults:
    # Used when a sub-score has nothing to measure (e.g. no declared names)
    NEUTRAL = 7.0
    EXCELLENT = 8
    GOOD = 6
    FAIR = 4


class StyleDeductions:
    LONG_LINE_FACTOR = 20
    LONG_LINE_CAP = 4.0
    TRAILING_WHITESPACE_FACTOR = 10
    TRAILING_WHITESPACE_CAP = 2.0
    MIXED_INDENTATION = 2.0
    SHORT_NAME = 0.5
    SHORT_NAME_CAP = 3.0


class PracticeDeductions:
    DEBUG_OUTPUT = 0.5
    DEBUG_OUTPUT_CAP = 3.0
    TODO = 0.25
    TODO_CAP = 1.5
    LEGACY_DECLARATION = 0.5
    LEGACY_DECLARATION_CAP = 2.0
    LOW_COMMENTS = 1.5
    LONG_FUNCTION = 1.0
    LONG_FUNCTION_CAP = 3.0


class EngineDefaults:
    MAX_FILES = 10
    CACHE_SIZE = 256
    FEATURE_CACHE_SIZE = 1024
    ESTIMATOR_TIMEOUT = 2.0
    ESTIMATOR_WORKERS = 2
