from typing import Dict, FrozenSet, Set

IGNORE_DIRS: Set[str] = {
    '.git',
    'node_modules',
    'venv',
    '.venv',
    '__pycache__',
    'dist',
    'build',
    '.next',
    'coverage',
    '.idea',
    '.vscode',
    'target',
    'out',
}

IGNORE_FILES: Set[str] = {
    'package-lock.json', 'yarn.lock', 'pnpm-lock.yaml', 'cargo.lock',
    'poetry.lock', 'Gemfile.lock', 'composer.lock', 'mix.lock'
}

# Minified bundles parse fine but score as one enormous line of code.
IGNORE_SUFFIXES: Set[str] = {'.min.js', '.min.mjs', '.bundle.js'}

# `.h` is treated as C++ so that class declarations in headers parse.
EXTENSION_LANGUAGES: Dict[str, str] = {
    '.c': 'c',
    '.cpp': 'cpp', '.cc': 'cpp', '.cxx': 'cpp', '.hpp': 'cpp', '.hh': 'cpp', '.h': 'cpp',
    '.py': 'python',
    '.java': 'java',
    '.rs': 'rust',
    '.go': 'go',
    '.js': 'javascript', '.mjs': 'javascript', '.cjs': 'javascript', '.jsx': 'javascript',
    '.ts': 'typescript', '.mts': 'typescript', '.cts': 'typescript',
}

# Java and Rust split comments into line/block node types.
COMMENT_NODE_TYPES: FrozenSet[str] = frozenset({'comment', 'line_comment', 'block_comment'})

IDENTIFIER_NODE_TYPES: FrozenSet[str] = frozenset({'identifier'})

NAMING_MAX_SHORT_LENGTH = 2
NAMING_ALLOWLIST: FrozenSet[str] = frozenset({
    'i', 'j', 'k', 'x', 'y', 'z', 'os', 'fs', 'it', 'c', 'ts', 'js',
})
NAMING_PENALTY_PER_VIOLATION = 5.0

# --- Scoring anchors ---
# Complexity: perfect at 1, zero at 20.
COMPLEXITY_BEST = 1.0
COMPLEXITY_WORST = 20.0
# Function length in lines: perfect at 10, zero at 100.
LENGTH_BEST = 10.0
LENGTH_WORST = 100.0
# Comment coverage (percent): bell curve peaking at 15 for source files,
# linear ramp saturating at 30 for files without functions.
COMMENT_IDEAL_RATIO = 15.0
COMMENT_SATURATION_RATIO = 30.0

COMPLEXITY_WEIGHT = 0.50
LENGTH_WEIGHT = 0.15
COMMENT_WEIGHT = 0.15
NAMING_WEIGHT = 0.20

NO_FUNCTIONS_COMMENT_WEIGHT = 0.7
NO_FUNCTIONS_NAMING_WEIGHT = 0.3

# Report colouring: green up to WARN, yellow up to BAD, red above.
INDEX_WARN_THRESHOLD = 40.0
INDEX_BAD_THRESHOLD = 60.0

DEFAULT_MAX_WORKERS = 4
FILE_TIMEOUT_SECONDS = 30.0
